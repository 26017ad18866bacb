"""
Role management service.

Handles administrator flag updates with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus

from .exceptions import (
    GroupNotFoundError,
    MembershipNotFoundError,
    PendingMembershipError,
    LastAdministratorError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def set_administrator(
    *,
    group_id: UUID,
    user_id: UUID,
    is_administrator: bool,
    updated_by: User
) -> GroupMembership:
    """
    Grant or revoke administrator rights (admin only).

    Uses select_for_update on the group so two administrators cannot
    revoke each other at the same time and leave the group without one.

    Args:
        group_id: UUID of the group
        user_id: UUID of the member to update
        is_administrator: New flag value
        updated_by: User performing the update (must be admin)

    Returns:
        Updated GroupMembership instance

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If updated_by is not admin
        MembershipNotFoundError: If target user has no membership
        PendingMembershipError: If target has not accepted the invitation
        LastAdministratorError: If revoking the last administrator
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(updated_by):
        raise InsufficientPermissionsError("Only group administrators can change administrator rights")

    try:
        membership = (
            GroupMembership.objects
            .select_for_update()
            .get(group=group, user_id=user_id)
        )
    except GroupMembership.DoesNotExist:
        raise MembershipNotFoundError("User is not a member of this group")

    if not membership.has_accepted_invitation:
        raise PendingMembershipError("User has not accepted the invitation yet")

    if membership.is_administrator == is_administrator:
        return membership

    if not is_administrator:
        remaining = (
            group.memberships
            .filter(status=MembershipStatus.ACCEPTED, is_administrator=True)
            .exclude(id=membership.id)
        )
        if not remaining.exists():
            raise LastAdministratorError("A group must keep at least one administrator")

    membership.is_administrator = is_administrator
    membership.save(update_fields=['is_administrator'])

    logger.info(
        "Administrator flag of %s in group %s set to %s by %s",
        user_id, group_id, is_administrator, updated_by.id
    )
    return membership
