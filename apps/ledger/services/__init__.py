"""
Ledger app services layer.

Read-only projections over the expense shares of a group: refunds and
balances. Nothing here writes to the database.
"""

from .reconciliation import (
    get_detailed_refunds,
    get_simplified_refunds,
)

from .balances import (
    compute_balances,
    get_group_balances,
)


__all__ = [
    # Refunds
    'get_detailed_refunds',
    'get_simplified_refunds',

    # Balances
    'compute_balances',
    'get_group_balances',
]
