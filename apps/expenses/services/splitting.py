"""
Cent-precise expense splitting.

The amount is converted to cents, divided with integer arithmetic and the
remainder handed out one cent at a time, so shares always sum exactly to
the amount.
"""

from decimal import Decimal
from typing import List, Sequence, Tuple, TypeVar

from .exceptions import InvalidRecipientError, ExpensesServiceError

Recipient = TypeVar('Recipient')

CENT = Decimal('0.01')


def calculate_shares(amount: Decimal, recipients: Sequence[Recipient]) -> List[Tuple[Recipient, Decimal]]:
    """
    Split an amount among recipients.

    Algorithm:
        1. Convert to cents: ``total = int(amount * 100)``
        2. Base share: ``base = total // N``
        3. Remainder: ``remainder = total % N``
        4. The first ``remainder`` recipients get ``base + 1`` cents
        5. Convert back: ``share = cents / 100``

    Example:
        10.00 among 3 recipients gives 3.34, 3.33, 3.33.

    Raises:
        InvalidRecipientError: If there are no recipients
    """
    if not recipients:
        raise InvalidRecipientError("At least one refund recipient is required")

    total_cents = int(amount.quantize(CENT) * 100)
    count = len(recipients)

    base_cents = total_cents // count
    remainder_cents = total_cents % count

    shares = []
    for index, recipient in enumerate(recipients):
        cents = base_cents + 1 if index < remainder_cents else base_cents
        shares.append((recipient, (Decimal(cents) / 100).quantize(CENT)))

    total_check = sum((share for _, share in shares), Decimal('0.00'))
    if total_check != amount:
        raise ExpensesServiceError(f"Split calculation error: {total_check} != {amount}")

    return shares
