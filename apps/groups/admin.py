# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, GroupMembership


class GroupMembershipInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMembership
    fk_name = 'group'
    extra = 0
    fields = ['user', 'status', 'is_administrator', 'invited_by', 'invited_at', 'responded_at']
    readonly_fields = ['invited_at', 'responded_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'name',
        'created_by',
        'member_count',
        'theme',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'description', 'created_by__pseudonym']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [GroupMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'theme', 'created_by')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of accepted members."""
        return obj.memberships.filter(status='accepted').count()
    member_count.short_description = 'Members'


@admin.register(GroupMembership)
class GroupMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Group Memberships."""

    list_display = ['user', 'group', 'status', 'is_administrator', 'invited_at']
    list_filter = ['status', 'is_administrator', 'invited_at']
    search_fields = ['user__pseudonym', 'user__email', 'group__name']
    readonly_fields = ['invited_at', 'responded_at']
    date_hierarchy = 'invited_at'
    ordering = ['-invited_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')
