"""
Expense management service.

Handles expense CRUD with validation of amounts, categories and refund
recipients. Shares are written together with the expense and rewritten
whenever the amount or the recipients change.
"""

import base64
import binascii
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Mapping, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Expense, ExpenseCategory, ExpenseShare
from apps.groups.models import Group, GroupMembership, MembershipStatus
from apps.groups.services import get_group_for_member

from .exceptions import (
    InvalidAmountError,
    InvalidCategoryError,
    InvalidRecipientError,
    InvalidAttachmentError,
    ExpenseNotFoundError,
    NotExpenseCreatorError,
)
from .splitting import CENT, calculate_shares

logger = logging.getLogger(__name__)

MAX_AMOUNT = Decimal('99999999.99')


def parse_amount(value) -> Decimal:
    """
    Parse a monetary amount.

    Accepts Decimal, int, float or str. The value must be finite, positive
    and carry at most two decimal places.

    Raises:
        InvalidAmountError: If the value is not a valid amount
    """
    if isinstance(value, bool):
        raise InvalidAmountError("Amount must be a number")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError("Amount must be a number")

    if not amount.is_finite():
        raise InvalidAmountError("Amount must be a finite number")

    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")

    if amount != amount.quantize(CENT):
        raise InvalidAmountError("Amount must not have more than two decimal places")

    if amount > MAX_AMOUNT:
        raise InvalidAmountError("Amount is too large")

    return amount.quantize(CENT)


def validate_category(value: Optional[str]) -> str:
    """
    Check a category against the closed set; empty means ``No category``.

    Raises:
        InvalidCategoryError: If the category is unknown
    """
    if not value:
        return ExpenseCategory.NO_CATEGORY

    if value not in ExpenseCategory.values:
        raise InvalidCategoryError(
            f"Invalid category '{value}'. Must be one of: {', '.join(ExpenseCategory.values)}"
        )
    return value


def validate_attachment(attachment: Mapping) -> tuple:
    """
    Check an attachment payload and return ``(filename, content)``.

    Raises:
        InvalidAttachmentError: If filename is missing or content is not base64
    """
    filename = (attachment.get('filename') or '').strip()
    content = attachment.get('content') or ''

    if not filename:
        raise InvalidAttachmentError("Attachment filename is required")

    try:
        base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidAttachmentError("Attachment content must be base64 encoded")

    return filename, content


def _resolve_recipients(group: Group, recipient_ids: Optional[Iterable]) -> List[User]:
    """
    Turn recipient ids into users, keeping the given order.

    ``None`` selects every accepted member of the group.

    Raises:
        InvalidRecipientError: If the list is empty, repeats a user or names
            someone who is not an accepted member
    """
    accepted = (
        GroupMembership.objects
        .filter(group=group, status=MembershipStatus.ACCEPTED)
        .select_related('user')
        .order_by('invited_at')
    )

    if recipient_ids is None:
        return [membership.user for membership in accepted]

    wanted = [str(recipient_id) for recipient_id in recipient_ids]

    if not wanted:
        raise InvalidRecipientError("At least one refund recipient is required")

    if len(set(wanted)) != len(wanted):
        raise InvalidRecipientError("Refund recipients must not repeat")

    members = {str(membership.user_id): membership.user for membership in accepted}

    unknown = [recipient_id for recipient_id in wanted if recipient_id not in members]
    if unknown:
        raise InvalidRecipientError("Refund recipients must be accepted members of the group")

    return [members[recipient_id] for recipient_id in wanted]


def _write_shares(expense: Expense, recipients: List[User]) -> List[ExpenseShare]:
    """Replace the shares of an expense with a fresh split."""
    expense.shares.all().delete()

    return ExpenseShare.objects.bulk_create([
        ExpenseShare(
            expense=expense,
            user=recipient,
            amount=share,
            position=position,
        )
        for position, (recipient, share) in enumerate(calculate_shares(expense.amount, recipients))
    ])


def _get_expense_for_update(*, group_id: UUID, expense_id: UUID, user: User) -> Expense:
    get_group_for_member(group_id=group_id, user=user)

    try:
        expense = (
            Expense.objects
            .select_for_update()
            .get(id=expense_id, group_id=group_id)
        )
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    if expense.creator_id != user.id:
        raise NotExpenseCreatorError("Only the creator can change this expense")

    return expense


@transaction.atomic
def create_expense(
    *,
    group_id: UUID,
    creator: User,
    title: str,
    amount,
    category: Optional[str] = None,
    refund_recipients: Optional[Iterable] = None,
    attachment: Optional[Mapping] = None,
    date: Optional[datetime] = None
) -> Expense:
    """
    Record an expense and split it among its refund recipients.

    Args:
        group_id: UUID of the group
        creator: Member who paid
        title: Short description
        amount: Positive amount with at most two decimal places
        category: One of ExpenseCategory, defaults to ``No category``
        refund_recipients: User ids sharing the expense, in split order.
            Omitted means every accepted member.
        attachment: Optional ``{"filename": ..., "content": <base64>}``
        date: When the expense happened, defaults to now

    Returns:
        Created Expense instance

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If creator is not an accepted member
        InvalidAmountError, InvalidCategoryError, InvalidRecipientError,
        InvalidAttachmentError: On invalid input
    """
    group = get_group_for_member(group_id=group_id, user=creator)

    amount = parse_amount(amount)
    category = validate_category(category)
    recipients = _resolve_recipients(group, refund_recipients)

    filename, content = '', ''
    if attachment:
        filename, content = validate_attachment(attachment)

    expense = Expense(
        group=group,
        creator=creator,
        title=title,
        amount=amount,
        category=category,
        attachment_filename=filename,
        attachment_content=content,
    )
    if date is not None:
        expense.date = date
    expense.save()

    _write_shares(expense, recipients)

    logger.info(
        "Expense %s of %s created in group %s by %s",
        expense.id, amount, group.id, creator.id
    )
    return expense


def get_group_expenses(*, group_id: UUID, user: User) -> QuerySet[Expense]:
    """
    Expenses of a group, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)

    return (
        Expense.objects
        .filter(group_id=group_id)
        .select_related('creator')
        .prefetch_related('shares')
        .order_by('-date', '-created_at')
    )


def get_expense(*, group_id: UUID, expense_id: UUID, user: User) -> Expense:
    """
    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
        ExpenseNotFoundError: If the expense is not part of the group
    """
    get_group_for_member(group_id=group_id, user=user)

    try:
        return (
            Expense.objects
            .select_related('creator')
            .prefetch_related('shares')
            .get(id=expense_id, group_id=group_id)
        )
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")


@transaction.atomic
def update_expense(
    *,
    group_id: UUID,
    expense_id: UUID,
    user: User,
    title: Optional[str] = None,
    amount=None,
    category: Optional[str] = None,
    refund_recipients: Optional[Iterable] = None,
    is_refunded: Optional[bool] = None,
    attachment: Optional[Mapping] = None,
    date: Optional[datetime] = None
) -> Expense:
    """
    Update an expense (creator only).

    Omitted fields are left untouched. Changing the amount or the
    recipients rewrites the shares. New recipients must be accepted
    members; a changed amount alone is split among the stored recipients,
    even those who have since left the group.

    Raises:
        ExpenseNotFoundError: If the expense is not part of the group
        NotExpenseCreatorError: If user is not the creator
        InvalidAmountError, InvalidCategoryError, InvalidRecipientError,
        InvalidAttachmentError: On invalid input
    """
    expense = _get_expense_for_update(group_id=group_id, expense_id=expense_id, user=user)

    resplit = False

    if title is not None:
        expense.title = title

    if amount is not None:
        new_amount = parse_amount(amount)
        resplit = resplit or new_amount != expense.amount
        expense.amount = new_amount

    if category is not None:
        expense.category = validate_category(category)

    if is_refunded is not None:
        expense.is_refunded = is_refunded

    if attachment is not None:
        expense.attachment_filename, expense.attachment_content = validate_attachment(attachment)

    if date is not None:
        expense.date = date

    if refund_recipients is not None:
        recipients = _resolve_recipients(expense.group, list(refund_recipients))
        resplit = True
    elif resplit:
        # Stored recipients stay, former members included
        recipients = [share.user for share in expense.shares.select_related('user')]

    expense.save()

    if resplit:
        _write_shares(expense, recipients)

    logger.info("Expense %s updated by %s", expense.id, user.id)
    return expense


@transaction.atomic
def delete_expense(*, group_id: UUID, expense_id: UUID, user: User) -> None:
    """
    Delete an expense and its shares (creator only).

    Raises:
        ExpenseNotFoundError: If the expense is not part of the group
        NotExpenseCreatorError: If user is not the creator
    """
    expense = _get_expense_for_update(group_id=group_id, expense_id=expense_id, user=user)
    expense.delete()

    logger.info("Expense %s deleted by %s", expense_id, user.id)


@transaction.atomic
def delete_attachment(*, group_id: UUID, expense_id: UUID, user: User) -> Expense:
    """Remove the attachment of an expense (creator only). No-op without one."""
    expense = _get_expense_for_update(group_id=group_id, expense_id=expense_id, user=user)

    if expense.has_attachment:
        expense.attachment_filename = ''
        expense.attachment_content = ''
        expense.save(update_fields=['attachment_filename', 'attachment_content', 'updated_at'])

    return expense
