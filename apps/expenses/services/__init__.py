"""
Expenses app services layer.

Expense writes validate their input and store the recipient split in the
same transaction.
"""

from .exceptions import (
    ExpensesServiceError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidRecipientError,
    InvalidAttachmentError,
    ExpenseNotFoundError,
    NotExpenseCreatorError,
)

from .splitting import calculate_shares

from .expense_management import (
    parse_amount,
    validate_category,
    create_expense,
    get_group_expenses,
    get_expense,
    update_expense,
    delete_expense,
    delete_attachment,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'InvalidAmountError',
    'InvalidCategoryError',
    'InvalidRecipientError',
    'InvalidAttachmentError',
    'ExpenseNotFoundError',
    'NotExpenseCreatorError',

    # Splitting
    'calculate_shares',

    # Expense Management
    'parse_amount',
    'validate_category',
    'create_expense',
    'get_group_expenses',
    'get_expense',
    'update_expense',
    'delete_expense',
    'delete_attachment',
]
