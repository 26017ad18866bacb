from decimal import Decimal

from rest_framework import serializers
from .models import Expense


# =============================================================================
# Input Serializers
# =============================================================================

class AttachmentSerializer(serializers.Serializer):
    """File attached to an expense, content as base64 text."""

    filename = serializers.CharField(max_length=255)
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Validate input for recording an expense.

    Fields:
        group_id (UUID): Group the expense belongs to
        refund_recipients (list[UUID]): Users sharing the expense in split
            order. Omitted means every accepted member.
    """

    group_id = serializers.UUIDField()
    title = serializers.CharField(max_length=200)
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    category = serializers.CharField(max_length=30, required=False, allow_blank=True)
    refund_recipients = serializers.ListField(
        child=serializers.UUIDField(),
        required=False
    )
    attachment = AttachmentSerializer(required=False, allow_null=True)
    date = serializers.DateTimeField(required=False)


class ExpenseUpdateSerializer(serializers.Serializer):
    """Partial expense update; omitted fields are left untouched."""

    title = serializers.CharField(max_length=200, required=False)
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=False
    )
    category = serializers.CharField(max_length=30, required=False, allow_blank=True)
    refund_recipients = serializers.ListField(
        child=serializers.UUIDField(),
        required=False
    )
    isRefunded = serializers.BooleanField(source='is_refunded', required=False)
    attachment = AttachmentSerializer(required=False)
    date = serializers.DateTimeField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseSerializer(serializers.ModelSerializer):
    """Main serializer for expenses."""

    creator_id = serializers.UUIDField(source='creator.id', read_only=True)
    creator_pseudonym = serializers.CharField(source='creator.pseudonym', read_only=True)
    group_id = serializers.UUIDField(read_only=True)
    refund_recipients = serializers.SerializerMethodField()
    isRefunded = serializers.BooleanField(source='is_refunded', read_only=True)
    attachment = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = [
            'id',
            'title',
            'amount',
            'date',
            'creator_id',
            'creator_pseudonym',
            'group_id',
            'category',
            'refund_recipients',
            'isRefunded',
            'attachment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_refund_recipients(self, obj):
        return [str(user_id) for user_id in obj.get_recipient_ids()]

    def get_attachment(self, obj):
        if not obj.has_attachment:
            return None
        return {
            'filename': obj.attachment_filename,
            'content': obj.attachment_content,
        }
