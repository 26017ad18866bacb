"""Domain-specific exceptions for chat app."""

from config.exceptions import ErrorKind


class ChatServiceError(Exception):
    """Base exception for all chat service errors."""
    kind = ErrorKind.UNKNOWN


class InvalidMessageError(ChatServiceError):
    """Raised when message content is empty or too long."""
    kind = ErrorKind.INVALID_INPUT


class InvalidPaginationError(ChatServiceError):
    """Raised when offset or limit is negative."""
    kind = ErrorKind.INVALID_INPUT
