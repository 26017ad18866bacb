"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    PasswordConfirmationError,
    InvalidProfileError,
    SoleAdministratorError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .account_management import (
    normalize_iban,
    update_profile,
    change_password,
    delete_user_account,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'PasswordConfirmationError',
    'InvalidProfileError',
    'SoleAdministratorError',
    # Services
    'register_user',
    'authenticate_user',
    'normalize_iban',
    'update_profile',
    'change_password',
    'delete_user_account',
]
