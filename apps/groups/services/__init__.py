"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    UserNotFoundError,
    NotMemberError,
    MembershipNotFoundError,
    InvitationNotFoundError,
    InvitationAlreadyAnsweredError,
    PendingMembershipError,
    LastAdministratorError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    get_group_for_member,
    get_user_groups,
    get_sole_administrator_groups,
)

from .invite_management import (
    invite_users,
    respond_to_invitation,
    get_pending_invitations,
    count_pending_invitations,
)

from .membership_management import (
    exclude_member,
    get_group_members,
    get_member_statuses,
)

from .role_management import (
    set_administrator,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'UserNotFoundError',
    'NotMemberError',
    'MembershipNotFoundError',
    'InvitationNotFoundError',
    'InvitationAlreadyAnsweredError',
    'PendingMembershipError',
    'LastAdministratorError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'update_group',
    'delete_group',
    'get_group_by_id',
    'get_group_for_member',
    'get_user_groups',
    'get_sole_administrator_groups',

    # Invitations
    'invite_users',
    'respond_to_invitation',
    'get_pending_invitations',
    'count_pending_invitations',

    # Membership Management
    'exclude_member',
    'get_group_members',
    'get_member_statuses',

    # Role Management
    'set_administrator',
]
