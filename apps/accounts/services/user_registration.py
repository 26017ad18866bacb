"""User registration service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import DELETED_PSEUDONYM_PREFIX

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    pseudonym: str,
    email: str,
    password: str,
    firstname: str = "",
    lastname: str = ""
) -> User:
    """
    Register a new user.

    Args:
        pseudonym: Unique login name, also shown to other group members
        email: User's email address
        password: User's password (will be hashed)
        firstname: Optional first name
        lastname: Optional last name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If pseudonym or email is already taken
            or the pseudonym uses the reserved prefix
    """
    if pseudonym.lower().startswith(DELETED_PSEUDONYM_PREFIX):
        raise UserRegistrationError("This pseudonym is reserved")

    if User.objects.filter(pseudonym__iexact=pseudonym).exists():
        raise UserRegistrationError("This pseudonym is already taken")

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("An account with this email already exists")

    user = User.objects.create_user(
        pseudonym=pseudonym,
        email=email,
        password=password,
        firstname=firstname,
        lastname=lastname,
    )

    logger.info("Registered user %s", user.id)
    return user
