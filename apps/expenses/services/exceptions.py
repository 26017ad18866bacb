"""
Domain-specific exceptions for expenses app.

These exceptions represent business rule violations. Each carries an
``ErrorKind`` that the API exception handler turns into an HTTP status.
"""

from config.exceptions import ErrorKind


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    kind = ErrorKind.UNKNOWN


class InvalidAmountError(ExpensesServiceError):
    """Raised when an amount is not a positive decimal with two places at most."""
    kind = ErrorKind.INVALID_INPUT


class InvalidCategoryError(ExpensesServiceError):
    """Raised when a category is outside the closed set."""
    kind = ErrorKind.INVALID_INPUT


class InvalidRecipientError(ExpensesServiceError):
    """Raised when refund recipients are empty, repeated or not accepted members."""
    kind = ErrorKind.INVALID_INPUT


class InvalidAttachmentError(ExpensesServiceError):
    """Raised when an attachment has no filename or its content is not base64."""
    kind = ErrorKind.INVALID_INPUT


class ExpenseNotFoundError(ExpensesServiceError):
    """Raised when an expense does not exist in the group."""
    kind = ErrorKind.NOT_FOUND


class NotExpenseCreatorError(ExpensesServiceError):
    """Raised when someone other than the creator changes an expense."""
    kind = ErrorKind.FORBIDDEN
