"""
Membership management service.

Handles member listing and exclusion with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus

from .exceptions import (
    GroupNotFoundError,
    MembershipNotFoundError,
    LastAdministratorError,
    InsufficientPermissionsError,
)
from .group_management import get_group_for_member

logger = logging.getLogger(__name__)


@transaction.atomic
def exclude_member(
    *,
    group_id: UUID,
    user_id: UUID,
    excluded_by: User
) -> None:
    """
    Remove a membership from a group.

    Administrators may remove anyone, including pending invitees. Any user
    may remove themself, which is how a member leaves a group. The last
    administrator cannot go while other memberships remain; if they are the
    only membership left the group is deleted with them.

    Expenses and shares of the removed user are kept, so their balance
    stays visible to the remaining members.

    Args:
        group_id: UUID of the group
        user_id: UUID of the user to remove
        excluded_by: User performing the removal

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If excluded_by is neither admin nor the target
        MembershipNotFoundError: If target user has no membership
        LastAdministratorError: If the last admin would leave other members behind
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    is_self = str(excluded_by.id) == str(user_id)
    if not is_self and not group.is_admin(excluded_by):
        raise InsufficientPermissionsError("Only group administrators can exclude members")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(group=group, user_id=user_id)
        )
    except GroupMembership.DoesNotExist:
        raise MembershipNotFoundError("User is not a member of this group")

    others = group.memberships.exclude(id=membership.id)

    if membership.has_accepted_invitation and membership.is_administrator:
        other_admins = others.filter(
            status=MembershipStatus.ACCEPTED,
            is_administrator=True
        )
        if not other_admins.exists():
            if others.exists():
                raise LastAdministratorError(
                    "The last administrator cannot leave while other members remain. "
                    "Promote another member first."
                )
            group.delete()
            logger.info("Group %s deleted as its last member %s left", group_id, user_id)
            return

    membership.delete()
    logger.info("User %s removed from group %s by %s", user_id, group_id, excluded_by.id)


def get_group_members(*, group_id: UUID, user: User) -> QuerySet[GroupMembership]:
    """
    Accepted members of a group, administrators first.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)

    return (
        GroupMembership.objects
        .filter(group_id=group_id, status=MembershipStatus.ACCEPTED)
        .select_related('user')
        .order_by('-is_administrator', 'invited_at')
    )


def get_member_statuses(*, group_id: UUID, user: User) -> QuerySet[GroupMembership]:
    """
    Every current membership of a group, pending invitations included.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('-is_administrator', 'status', 'invited_at')
    )
