from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['short_content', 'sender', 'group', 'timestamp']
    list_filter = ['timestamp']
    search_fields = ['content', 'sender__pseudonym', 'group__name']
    date_hierarchy = 'timestamp'
    ordering = ['-timestamp']

    def short_content(self, obj):
        return obj.content[:60]
    short_content.short_description = 'Message'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('sender', 'group')
