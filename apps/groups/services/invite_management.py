"""
Invitation management service.

Handles inviting users by pseudonym and answering invitations.
"""

import logging
from typing import Iterable, List, Tuple
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus

from .exceptions import (
    GroupNotFoundError,
    UserNotFoundError,
    InvitationNotFoundError,
    InvitationAlreadyAnsweredError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


def resolve_pseudonyms(pseudonyms: Iterable[str]) -> List[User]:
    """
    Look up active users by pseudonym, keeping the given order.

    Duplicates are collapsed. Any unknown pseudonym fails the whole lookup.

    Raises:
        UserNotFoundError: If at least one pseudonym does not exist
    """
    wanted = []
    for pseudonym in pseudonyms:
        if pseudonym not in wanted:
            wanted.append(pseudonym)

    if not wanted:
        return []

    users = {
        user.pseudonym: user
        for user in User.objects.filter(pseudonym__in=wanted, is_active=True)
    }

    missing = [pseudonym for pseudonym in wanted if pseudonym not in users]
    if missing:
        raise UserNotFoundError(f"Unknown users: {', '.join(missing)}")

    return [users[pseudonym] for pseudonym in wanted]


def create_invitations(
    *,
    group: Group,
    invited_by: User,
    users: Iterable[User]
) -> Tuple[List[GroupMembership], List[User]]:
    """
    Create pending memberships for users not yet related to the group.

    Must run inside the caller's transaction.

    Returns:
        Tuple of (created memberships, skipped users)
    """
    users = list(users)
    existing_ids = set(
        GroupMembership.objects
        .filter(group=group, user__in=users)
        .values_list('user_id', flat=True)
    )

    created = []
    skipped = []
    for user in users:
        if user.id in existing_ids:
            skipped.append(user)
            continue
        created.append(
            GroupMembership.objects.create(
                user=user,
                group=group,
                status=MembershipStatus.INVITED,
                invited_by=invited_by,
            )
        )

    if created:
        logger.info(
            "%d invitation(s) to group %s sent by %s",
            len(created), group.id, invited_by.id
        )

    return created, skipped


@transaction.atomic
def invite_users(
    *,
    group_id: UUID,
    invited_by: User,
    pseudonyms: Iterable[str]
) -> Tuple[List[GroupMembership], List[User]]:
    """
    Invite users into a group (admin only).

    Uses row-level locking on the group so concurrent invitations of the
    same user cannot both pass the existence check.

    Args:
        group_id: UUID of the group
        invited_by: Administrator sending the invitations
        pseudonyms: Pseudonyms of the users to invite

    Returns:
        Tuple of (created memberships, skipped users). Users that are
        already invited or already members are skipped.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If invited_by is not admin
        UserNotFoundError: If a pseudonym does not exist
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(invited_by):
        raise InsufficientPermissionsError("Only group administrators can invite users")

    users = resolve_pseudonyms(pseudonyms)

    return create_invitations(group=group, invited_by=invited_by, users=users)


@transaction.atomic
def respond_to_invitation(
    *,
    group_id: UUID,
    user: User,
    accept: bool
) -> GroupMembership:
    """
    Accept or decline a pending invitation.

    Accepting moves the membership to ``accepted``. Declining deletes it;
    the returned instance is then unsaved.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InvitationNotFoundError: If the user has no membership in the group
        InvitationAlreadyAnsweredError: If the invitation was already accepted
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(group_id=group_id, user=user)
        )
    except GroupMembership.DoesNotExist:
        raise InvitationNotFoundError("No invitation to this group")

    if membership.status != MembershipStatus.INVITED:
        raise InvitationAlreadyAnsweredError("Invitation has already been accepted")

    if accept:
        membership.status = MembershipStatus.ACCEPTED
        membership.responded_at = timezone.now()
        membership.save(update_fields=['status', 'responded_at'])
        logger.info("User %s joined group %s", user.id, group_id)
    else:
        membership.delete()
        logger.info("User %s declined invitation to group %s", user.id, group_id)

    return membership


def get_pending_invitations(*, user: User) -> QuerySet[GroupMembership]:
    """Pending invitations of the user, oldest first."""
    return (
        GroupMembership.objects
        .filter(user=user, status=MembershipStatus.INVITED)
        .select_related('group', 'invited_by')
        .order_by('invited_at')
    )


def count_pending_invitations(*, user: User) -> int:
    return GroupMembership.objects.filter(
        user=user,
        status=MembershipStatus.INVITED
    ).count()
