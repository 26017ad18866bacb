from rest_framework import serializers
from .models import Message, MESSAGE_MAX_LENGTH


class MessageCreateSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    content = serializers.CharField(max_length=MESSAGE_MAX_LENGTH)


class MessagePageSerializer(serializers.Serializer):
    """
    Validate query parameters for a page of messages.

    Query Parameters:
        offset (int): Number of newer messages to skip
        limit (int): Page size
    """

    offset = serializers.IntegerField(required=False, default=0)
    limit = serializers.IntegerField(required=False)


class MessageSerializer(serializers.ModelSerializer):
    group_id = serializers.UUIDField(read_only=True)
    sender_id = serializers.UUIDField(source='sender.id', read_only=True)
    sender_pseudonym = serializers.CharField(source='sender.pseudonym', read_only=True)

    class Meta:
        model = Message
        fields = ['id', 'group_id', 'sender_id', 'sender_pseudonym', 'content', 'timestamp']
        read_only_fields = fields
