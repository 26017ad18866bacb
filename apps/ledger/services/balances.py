"""
Balance ledger service.

A member's balance is what others owe them as creator minus what they owe
other creators. Balances are recomputed from the stored shares on every
call and always sum to zero.
"""

from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from apps.accounts.models import User
from apps.groups.models import GroupMembership, MembershipStatus
from apps.groups.services import get_group_for_member

from .reconciliation import ZERO, compute_pairwise_debts, open_shares


def compute_balances(*, group_id: UUID) -> Dict[UUID, Decimal]:
    """
    Signed balance per user of a group.

    Every accepted member appears, at zero when idle. Former members stay
    listed while their balance is not zero.
    """
    member_ids = list(
        GroupMembership.objects
        .filter(group_id=group_id, status=MembershipStatus.ACCEPTED)
        .order_by('invited_at')
        .values_list('user_id', flat=True)
    )
    balances = {user_id: ZERO for user_id in member_ids}

    for (debtor_id, creditor_id), amount in compute_pairwise_debts(open_shares(group_id)).items():
        balances[creditor_id] = balances.get(creditor_id, ZERO) + amount
        balances[debtor_id] = balances.get(debtor_id, ZERO) - amount

    members = set(member_ids)
    return {
        user_id: balance
        for user_id, balance in balances.items()
        if user_id in members or balance != 0
    }


def get_group_balances(*, group_id: UUID, user: User) -> List[dict]:
    """
    Balances of a group with the users they belong to, by pseudonym.

    Returns a list of ``{"user": User, "balance": Decimal, "is_member": bool}``.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)

    balances = compute_balances(group_id=group_id)
    member_ids = set(
        GroupMembership.objects
        .filter(group_id=group_id, status=MembershipStatus.ACCEPTED)
        .values_list('user_id', flat=True)
    )

    entries = [
        {
            'user': account,
            'balance': balances[account.id],
            'is_member': account.id in member_ids,
        }
        for account in User.objects.filter(id__in=list(balances))
    ]
    entries.sort(key=lambda entry: entry['user'].get_display_name())
    return entries
