from django.db import models
from django.core.validators import MinLengthValidator
from django.utils import timezone
import uuid


MESSAGE_MAX_LENGTH = 2000


class Message(models.Model):
    """Text posted to a group's message board."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='messages'
    )
    sender = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='messages_sent'
    )

    content = models.TextField(
        max_length=MESSAGE_MAX_LENGTH,
        validators=[MinLengthValidator(1)]
    )
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'messages'
        indexes = [
            models.Index(fields=['group', '-timestamp'], name='messages_group_time_idx'),
        ]
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.sender.get_display_name()} in {self.group.name}: {self.content[:40]}"
