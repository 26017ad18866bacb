"""Chat app services layer."""

from .exceptions import (
    ChatServiceError,
    InvalidMessageError,
    InvalidPaginationError,
)

from .message_management import (
    post_message,
    get_group_messages,
    count_group_messages,
)

__all__ = [
    # Exceptions
    'ChatServiceError',
    'InvalidMessageError',
    'InvalidPaginationError',
    # Message Management
    'post_message',
    'get_group_messages',
    'count_group_messages',
]
