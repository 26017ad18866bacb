"""
Group message board service.

Only accepted members of a group may post or read its messages. Reads are
paginated with offset/limit, newest first.
"""

import logging
from typing import List, Optional
from uuid import UUID

from django.conf import settings

from apps.accounts.models import User
from apps.chat.models import Message, MESSAGE_MAX_LENGTH
from apps.groups.services import get_group_for_member

from .exceptions import InvalidMessageError, InvalidPaginationError

logger = logging.getLogger(__name__)


def post_message(*, group_id: UUID, sender: User, content: str) -> Message:
    """
    Post a message to a group.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If sender is not an accepted member
        InvalidMessageError: If content is blank or too long
    """
    group = get_group_for_member(group_id=group_id, user=sender)

    content = (content or '').strip()
    if not content:
        raise InvalidMessageError("Message cannot be empty")
    if len(content) > MESSAGE_MAX_LENGTH:
        raise InvalidMessageError(f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters")

    message = Message.objects.create(group=group, sender=sender, content=content)

    logger.debug("Message %s posted to group %s by %s", message.id, group.id, sender.id)
    return message


def get_group_messages(
    *,
    group_id: UUID,
    user: User,
    offset: int = 0,
    limit: Optional[int] = None
) -> List[Message]:
    """
    One page of a group's messages, newest first.

    Args:
        offset: Number of newer messages to skip
        limit: Page size, defaults to MESSAGES_PAGE_SIZE and is capped at
            MESSAGES_MAX_PAGE_SIZE

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
        InvalidPaginationError: If offset or limit is negative
    """
    get_group_for_member(group_id=group_id, user=user)

    if limit is None:
        limit = settings.MESSAGES_PAGE_SIZE

    if offset < 0 or limit < 0:
        raise InvalidPaginationError("Offset and limit must not be negative")

    limit = min(limit, settings.MESSAGES_MAX_PAGE_SIZE)

    return list(
        Message.objects
        .filter(group_id=group_id)
        .select_related('sender')
        .order_by('-timestamp', '-id')[offset:offset + limit]
    )


def count_group_messages(*, group_id: UUID, user: User) -> int:
    """
    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not an accepted member
    """
    get_group_for_member(group_id=group_id, user=user)
    return Message.objects.filter(group_id=group_id).count()
