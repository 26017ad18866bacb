from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class ExpenseCategory(models.TextChoices):
    NO_CATEGORY = 'No category', 'No category'
    ACCOMMODATION = 'Accommodation', 'Accommodation'
    ENTERTAINMENT = 'Entertainment', 'Entertainment'
    GROCERIES = 'Groceries', 'Groceries'
    RESTAURANTS_AND_BARS = 'Restaurants & Bars', 'Restaurants & Bars'
    SHOPPING = 'Shopping', 'Shopping'
    TRANSPORT = 'Transport', 'Transport'
    HEALTHCARE = 'Healthcare', 'Healthcare'
    INSURANCE = 'Insurance', 'Insurance'


class Expense(models.Model):
    """Payment made by one member on behalf of a set of recipients."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses'
    )

    # Payer
    creator = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expenses_created'
    )

    title = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(
        max_length=30,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.NO_CATEGORY
    )

    # Settled out-of-band; excluded from refunds and balances
    is_refunded = models.BooleanField(default=False)

    # Optional attachment, stored as given (base64 text)
    attachment_filename = models.CharField(max_length=255, blank=True)
    attachment_content = models.TextField(blank=True)

    date = models.DateTimeField(default=timezone.now)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['group', 'date'], name='expenses_group_date_idx'),
            models.Index(fields=['creator'], name='expenses_creator_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.title} - {self.amount} ({self.group.name})"

    @property
    def has_attachment(self):
        return bool(self.attachment_filename)

    def get_recipient_ids(self):
        """Recipient ids in split order."""
        return [share.user_id for share in self.shares.all()]


class ExpenseShare(models.Model):
    """Part of an expense owed by one recipient to the creator."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    expense = models.ForeignKey(
        Expense,
        on_delete=models.CASCADE,
        related_name='shares'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_shares'
    )

    amount = models.DecimalField(max_digits=10, decimal_places=2)

    # Index in the recipient list; remainder cents go to the lowest positions
    position = models.PositiveSmallIntegerField()

    class Meta:
        db_table = 'expense_shares'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user'], name='expense_shares_user_idx'),
        ]
        ordering = ['position']

    def __str__(self):
        return f"{self.user.get_display_name()} owes {self.amount} for {self.expense.title}"
