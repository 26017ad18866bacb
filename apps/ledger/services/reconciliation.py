"""
Refund reconciliation service.

Derives who owes whom from the stored expense shares of a group. Nothing is
cached: every call recomputes from the shares of expenses that are not
marked as refunded.

Two projections are offered:
    Detailed: one record per expense listing every recipient share.
    Simplified: one record per pair of users, opposite-direction
        obligations cancelled against each other. This is pairwise
        netting, not a multi-party minimisation.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Set, Tuple
from uuid import UUID

from apps.accounts.models import User
from apps.expenses.models import Expense, ExpenseShare
from apps.groups.models import GroupMembership, MembershipStatus
from apps.groups.services import get_group_for_member

ZERO = Decimal('0.00')


def get_member_ids(group_id: UUID) -> Set[UUID]:
    """Ids of the current accepted members of a group."""
    return set(
        GroupMembership.objects
        .filter(group_id=group_id, status=MembershipStatus.ACCEPTED)
        .values_list('user_id', flat=True)
    )


def open_shares(group_id: UUID):
    """Shares of the group's expenses that still count towards refunds."""
    return (
        ExpenseShare.objects
        .filter(expense__group_id=group_id, expense__is_refunded=False)
        .select_related('user', 'expense__creator')
    )


def compute_pairwise_debts(shares) -> Dict[Tuple[UUID, UUID], Decimal]:
    """
    Sum what each debtor owes each creditor.

    Returns ``{(debtor_id, creditor_id): amount}``. A recipient's share of
    their own expense is not a debt.
    """
    debts = defaultdict(lambda: ZERO)
    for share in shares:
        creditor_id = share.expense.creator_id
        if share.user_id == creditor_id:
            continue
        debts[(share.user_id, creditor_id)] += share.amount
    return debts


def get_detailed_refunds(*, group_id: UUID, user: User) -> List[dict]:
    """
    One record per open expense, newest first.

    Each record lists every recipient share in split order, the creator's
    own share included, so the shares sum to the expense amount.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)
    member_ids = get_member_ids(group_id)

    expenses = (
        Expense.objects
        .filter(group_id=group_id, is_refunded=False)
        .select_related('creator')
        .prefetch_related('shares__user')
        .order_by('-date', '-created_at')
    )

    records = []
    for expense in expenses:
        records.append({
            'expense_id': expense.id,
            'title': expense.title,
            'category': expense.category,
            'date': expense.date,
            'creator_id': expense.creator_id,
            'creator_pseudonym': expense.creator.get_display_name(),
            'creator_is_member': expense.creator_id in member_ids,
            'amount': expense.amount,
            'refunds': [
                {
                    'recipient_id': share.user_id,
                    'recipient_pseudonym': share.user.get_display_name(),
                    'recipient_is_member': share.user_id in member_ids,
                    'refund_amount': share.amount,
                }
                for share in expense.shares.all()
            ],
        })
    return records


def get_simplified_refunds(*, group_id: UUID, user: User) -> List[dict]:
    """
    Net obligations per pair of users.

    ``creator`` is the user owed money, ``recipient`` the user who owes it.
    Pairs that cancel out completely are left out. Records are ordered by
    creator pseudonym, then recipient pseudonym.

    Example:
        A owes B 10.00 from one expense and B owes A 4.00 from another:
        one record, creator B, recipient A, 6.00.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)
    member_ids = get_member_ids(group_id)

    users = {}
    shares = list(open_shares(group_id))
    for share in shares:
        users[share.user_id] = share.user
        users[share.expense.creator_id] = share.expense.creator

    debts = compute_pairwise_debts(shares)

    records = []
    seen = set()
    for debtor_id, creditor_id in debts:
        pair = frozenset((debtor_id, creditor_id))
        if pair in seen:
            continue
        seen.add(pair)

        net = debts[(debtor_id, creditor_id)] - debts.get((creditor_id, debtor_id), ZERO)
        if net == 0:
            continue
        if net < 0:
            debtor_id, creditor_id, net = creditor_id, debtor_id, -net

        creditor, debtor = users[creditor_id], users[debtor_id]
        records.append({
            'creator_id': creditor_id,
            'creator_pseudonym': creditor.get_display_name(),
            'recipient_id': debtor_id,
            'recipient_pseudonym': debtor.get_display_name(),
            'refund_amount': net,
            'creator_is_member': creditor_id in member_ids,
            'recipient_is_member': debtor_id in member_ids,
        })

    records.sort(key=lambda record: (record['creator_pseudonym'], record['recipient_pseudonym']))
    return records
