"""Account management service."""

import logging
import re
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count
from django.contrib.auth import get_user_model

from apps.accounts.models import DELETED_PSEUDONYM_PREFIX
from apps.groups.models import Group, GroupMembership
from apps.groups.services import get_sole_administrator_groups

from .exceptions import (
    InvalidProfileError,
    PasswordConfirmationError,
    SoleAdministratorError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

IBAN_PATTERN = re.compile(r'^[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}$')


def normalize_iban(raw: str) -> str:
    """
    Strip spaces, upper-case and checksum-validate an IBAN.

    An empty value clears the IBAN and is returned unchanged.

    Raises:
        InvalidProfileError: If the value is not a valid IBAN
    """
    iban = re.sub(r'\s+', '', raw or '').upper()
    if not iban:
        return ''

    if not IBAN_PATTERN.match(iban):
        raise InvalidProfileError("Invalid IBAN format")

    # ISO 13616 mod-97 check: move country + check digits to the end,
    # map letters to 10..35 and the remainder must be 1
    rearranged = iban[4:] + iban[:4]
    digits = ''.join(str(int(ch, 36)) for ch in rearranged)
    if int(digits) % 97 != 1:
        raise InvalidProfileError("Invalid IBAN checksum")

    return iban


@transaction.atomic
def update_profile(
    *,
    user_id: UUID,
    pseudonym: Optional[str] = None,
    email: Optional[str] = None,
    firstname: Optional[str] = None,
    lastname: Optional[str] = None,
    iban: Optional[str] = None
) -> User:
    """
    Update the mutable profile fields of a user.

    Args:
        user_id: User's ID
        pseudonym: New pseudonym (must stay unique)
        email: New email (must stay unique)
        firstname: New first name
        lastname: New last name
        iban: New IBAN, empty string clears it

    Returns:
        Updated User instance

    Raises:
        InvalidProfileError: If pseudonym/email is taken, the pseudonym is
            reserved or IBAN is invalid
    """
    user = (
        User.objects
        .select_for_update()
        .get(id=user_id)
    )

    update_fields = []

    if pseudonym is not None and pseudonym != user.pseudonym:
        if pseudonym.lower().startswith(DELETED_PSEUDONYM_PREFIX):
            raise InvalidProfileError("This pseudonym is reserved")
        if User.objects.filter(pseudonym__iexact=pseudonym).exclude(id=user.id).exists():
            raise InvalidProfileError("This pseudonym is already taken")
        user.pseudonym = pseudonym
        update_fields.append('pseudonym')

    if email is not None and email != user.email:
        email = User.objects.normalize_email(email)
        if User.objects.filter(email__iexact=email).exclude(id=user.id).exists():
            raise InvalidProfileError("An account with this email already exists")
        user.email = email
        update_fields.append('email')

    if firstname is not None:
        user.firstname = firstname
        update_fields.append('firstname')

    if lastname is not None:
        user.lastname = lastname
        update_fields.append('lastname')

    if iban is not None:
        user.iban = normalize_iban(iban)
        update_fields.append('iban')

    if update_fields:
        user.save(update_fields=update_fields)

    return user


@transaction.atomic
def change_password(*, user_id: UUID, current_password: str, new_password: str) -> None:
    """
    Replace the user's password after checking the current one.

    Raises:
        PasswordConfirmationError: If current password is incorrect
    """
    user = (
        User.objects
        .select_for_update()
        .get(id=user_id)
    )

    if not user.check_password(current_password):
        raise PasswordConfirmationError("Invalid password")

    user.set_password(new_password)
    user.save(update_fields=['password'])


@transaction.atomic
def delete_user_account(*, user_id: UUID, password: str) -> None:
    """
    Delete an account by anonymizing it.

    This operation:
    1. Verifies the password
    2. Refuses if the user is the only administrator of a group that
       still has other (accepted or invited) members
    3. Deletes groups where the user is the only member
    4. Removes the user's remaining memberships
    5. Anonymizes the user row (expenses and shares keep referencing it)

    Args:
        user_id: User's ID
        password: User's password for confirmation

    Raises:
        PasswordConfirmationError: If password is incorrect
        SoleAdministratorError: If the user would leave groups without admin
    """
    user = (
        User.objects
        .select_for_update()
        .get(id=user_id)
    )

    if not user.check_password(password):
        raise PasswordConfirmationError("Invalid password")

    blocking_groups = list(get_sole_administrator_groups(user=user))
    if blocking_groups:
        logger.warning(
            "Refused deletion of user %s: sole administrator of %d group(s)",
            user.id,
            len(blocking_groups),
        )
        names = ', '.join(group.name for group in blocking_groups)
        raise SoleAdministratorError(
            "You are the only administrator of the following groups: "
            f"{names}. Delete them or make another member administrator "
            "before deleting your account.",
            blocking_groups,
        )

    user_group_ids = GroupMembership.objects.filter(user=user).values('group_id')
    solo_groups = (
        Group.objects
        .filter(id__in=user_group_ids)
        .annotate(member_total=Count('memberships'))
        .filter(member_total=1)
    )
    solo_group_ids = list(solo_groups.values_list('id', flat=True))
    Group.objects.filter(id__in=solo_group_ids).delete()

    GroupMembership.objects.filter(user=user).delete()

    user.anonymize()

    logger.info(
        "Deleted account %s (%d solo group(s) removed)",
        user.id,
        len(solo_group_ids),
    )
