"""
Group management service.

Handles group CRUD operations with proper transaction safety.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Q, QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus

from .exceptions import (
    GroupNotFoundError,
    InsufficientPermissionsError,
    NotMemberError,
)
from .invite_management import create_invitations, resolve_pseudonyms

logger = logging.getLogger(__name__)


@transaction.atomic
def create_group(
    *,
    name: str,
    creator: User,
    description: str = '',
    theme: str = '',
    invited_pseudonyms: Optional[Iterable[str]] = None
) -> Group:
    """
    Create a new group with its creator as first administrator.

    This is a multi-step operation wrapped in a transaction:
    1. Resolve invited pseudonyms (fails before writing anything)
    2. Create the group
    3. Create the creator's accepted administrator membership
    4. Create one pending invitation per invited user

    Args:
        name: Group name
        creator: User creating the group
        description: Optional group description
        theme: Optional display theme
        invited_pseudonyms: Pseudonyms of users to invite right away

    Returns:
        Created Group instance

    Raises:
        UserNotFoundError: If an invited pseudonym does not exist
    """
    invitees = resolve_pseudonyms(invited_pseudonyms or [])

    group = Group.objects.create(
        name=name,
        description=description,
        theme=theme,
        created_by=creator,
    )

    GroupMembership.objects.create(
        user=creator,
        group=group,
        status=MembershipStatus.ACCEPTED,
        is_administrator=True,
        invited_by=creator,
    )

    create_invitations(
        group=group,
        invited_by=creator,
        users=[user for user in invitees if user.id != creator.id],
    )

    logger.info("Group %s created by %s", group.id, creator.id)
    return group


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def get_group_for_member(*, group_id: UUID, user: User) -> Group:
    """
    Get a group the user is an accepted member of.

    Used as the read gate for everything scoped to a group (members,
    expenses, balances, refunds, messages).

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    group = get_group_by_id(group_id=group_id)

    if not group.has_member(user):
        raise NotMemberError("You are not a member of this group")

    return group


def get_user_groups(*, user: User) -> QuerySet[Group]:
    """Groups where the user has accepted membership, newest first."""
    return (
        Group.objects
        .filter(
            memberships__user=user,
            memberships__status=MembershipStatus.ACCEPTED
        )
        .distinct()
        .order_by('-created_at')
    )


def get_sole_administrator_groups(*, user: User) -> QuerySet[Group]:
    """
    Groups that would be left without administrator if the user went away.

    A group counts when the user is its only accepted administrator and at
    least one other membership (accepted or pending) exists.
    """
    admin_group_ids = (
        GroupMembership.objects
        .filter(
            user=user,
            status=MembershipStatus.ACCEPTED,
            is_administrator=True
        )
        .values('group_id')
    )

    return (
        Group.objects
        .filter(id__in=admin_group_ids)
        .annotate(
            admin_total=Count(
                'memberships',
                filter=Q(
                    memberships__status=MembershipStatus.ACCEPTED,
                    memberships__is_administrator=True
                ),
                distinct=True
            ),
            member_total=Count('memberships', distinct=True),
        )
        .filter(admin_total=1, member_total__gt=1)
        .order_by('name')
    )


@transaction.atomic
def update_group(
    *,
    group_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    theme: Optional[str] = None
) -> Group:
    """
    Update group details (admin only).

    Uses select_for_update to prevent concurrent modifications.

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not admin
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group administrators can update the group")

    update_fields = ['updated_at']

    if name is not None:
        group.name = name
        update_fields.append('name')

    if description is not None:
        group.description = description
        update_fields.append('description')

    if theme is not None:
        group.theme = theme
        update_fields.append('theme')

    group.save(update_fields=update_fields)

    return group


@transaction.atomic
def delete_group(*, group_id: UUID, user: User) -> None:
    """
    Delete a group (admin only).

    Cascading deletes will automatically remove:
    - All memberships and invitations
    - All expenses and their shares
    - All messages

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not admin
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_admin(user):
        raise InsufficientPermissionsError("Only group administrators can delete the group")

    group.delete()
    logger.info("Group %s deleted by %s", group_id, user.id)
