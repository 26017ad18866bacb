# ==========================================
# apps/expenses/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Expense, ExpenseShare


class ExpenseShareInline(admin.TabularInline):
    """Inline admin for the recipient split of an expense."""
    model = ExpenseShare
    extra = 0
    fields = ['position', 'user', 'amount']
    readonly_fields = ['position', 'user', 'amount']
    ordering = ['position']

    def has_add_permission(self, request, obj=None):
        """Shares are written by the expense service only."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """
    Admin interface for Expenses.

    Provides:
    - Expense listing with payer, group and settlement state
    - Inline recipient shares (read-only)
    - Filtering by category, refund state and date
    """

    list_display = [
        'title',
        'creator',
        'group',
        'amount',
        'category',
        'refunded_badge',
        'date',
    ]

    list_filter = [
        'category',
        'is_refunded',
        'date',
    ]

    search_fields = [
        'title',
        'creator__pseudonym',
        'group__name',
    ]

    readonly_fields = ['created_at', 'updated_at']
    inlines = [ExpenseShareInline]
    date_hierarchy = 'date'
    ordering = ['-date']

    fieldsets = (
        ('Expense', {
            'fields': ('group', 'creator', 'title', 'amount', 'category', 'date', 'is_refunded')
        }),
        ('Attachment', {
            'fields': ('attachment_filename',),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def refunded_badge(self, obj):
        """Display settlement state as colored badge."""
        if obj.is_refunded:
            label, color = 'Refunded', '#6B8E5E'
        else:
            label, color = 'Open', '#E5A04A'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color,
            label,
        )
    refunded_badge.short_description = 'State'
    refunded_badge.admin_order_field = 'is_refunded'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('creator', 'group')
