"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations. Each carries an
``ErrorKind`` that the API exception handler turns into an HTTP status.
"""

from config.exceptions import ErrorKind


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    kind = ErrorKind.UNKNOWN


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist."""
    kind = ErrorKind.NOT_FOUND


class UserNotFoundError(GroupsServiceError):
    """Raised when an invited or targeted user does not exist."""
    kind = ErrorKind.NOT_FOUND


class NotMemberError(GroupsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    kind = ErrorKind.FORBIDDEN


class MembershipNotFoundError(GroupsServiceError):
    """Raised when the targeted user has no membership in the group."""
    kind = ErrorKind.NOT_FOUND


class InvitationNotFoundError(GroupsServiceError):
    """Raised when responding without a membership record."""
    kind = ErrorKind.NOT_FOUND


class InvitationAlreadyAnsweredError(GroupsServiceError):
    """Raised when responding to an invitation that was already accepted."""
    kind = ErrorKind.INVALID_STATE


class PendingMembershipError(GroupsServiceError):
    """Raised when an operation needs an accepted member but finds an invitee."""
    kind = ErrorKind.INVALID_STATE


class LastAdministratorError(GroupsServiceError):
    """Raised when an operation would leave a group without administrator."""
    kind = ErrorKind.INVALID_STATE


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user lacks required permissions for an action."""
    kind = ErrorKind.FORBIDDEN
