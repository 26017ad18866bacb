"""Domain-specific exceptions for accounts services."""

from config.exceptions import ErrorKind


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    kind = ErrorKind.UNKNOWN


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    kind = ErrorKind.INVALID_INPUT


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    kind = ErrorKind.UNAUTHENTICATED


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    kind = ErrorKind.FORBIDDEN


class PasswordConfirmationError(AccountsServiceError):
    """Raised when password confirmation fails."""
    kind = ErrorKind.FORBIDDEN


class InvalidProfileError(AccountsServiceError):
    """Raised when a profile update carries invalid or duplicate values."""
    kind = ErrorKind.INVALID_INPUT


class SoleAdministratorError(AccountsServiceError):
    """
    Raised when deleting an account would leave groups without administrator.

    ``groups`` holds the blocking groups so the caller can list them.
    """
    kind = ErrorKind.INVALID_STATE

    def __init__(self, message, groups):
        super().__init__(message)
        self.groups = list(groups)

    @property
    def extra(self):
        return {
            'groups': [
                {'id': str(group.id), 'name': group.name}
                for group in self.groups
            ]
        }
