from rest_framework import serializers


# =============================================================================
# Input Serializers
# =============================================================================

class RefundFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for refunds.

    Query Parameters:
        simplified (bool): Pairwise netted records (default) or one record
            per expense
    """

    simplified = serializers.BooleanField(required=False, default=True)


# =============================================================================
# Output Serializers
# =============================================================================

class MemberBalanceSerializer(serializers.Serializer):
    id = serializers.UUIDField(source='user.id')
    pseudonym = serializers.CharField(source='user.pseudonym')
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_member = serializers.BooleanField()


class SimplifiedRefundSerializer(serializers.Serializer):
    """Net amount the recipient owes the creator."""

    creator_id = serializers.UUIDField()
    creator_pseudonym = serializers.CharField()
    recipient_id = serializers.UUIDField()
    recipient_pseudonym = serializers.CharField()
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    creator_is_member = serializers.BooleanField()
    recipient_is_member = serializers.BooleanField()


class RecipientShareSerializer(serializers.Serializer):
    recipient_id = serializers.UUIDField()
    recipient_pseudonym = serializers.CharField()
    recipient_is_member = serializers.BooleanField()
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class DetailedRefundSerializer(serializers.Serializer):
    """One expense with the share each recipient owes."""

    expense_id = serializers.UUIDField()
    title = serializers.CharField()
    category = serializers.CharField()
    date = serializers.DateTimeField()
    creator_id = serializers.UUIDField()
    creator_pseudonym = serializers.CharField()
    creator_is_member = serializers.BooleanField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    refunds = RecipientShareSerializer(many=True)
