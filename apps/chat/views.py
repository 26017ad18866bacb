from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    MessageCreateSerializer,
    MessagePageSerializer,
    MessageSerializer,
)
from .services import (
    post_message,
    get_group_messages,
    count_group_messages,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class MessageCountResponseSerializer(drf_serializers.Serializer):
    count = drf_serializers.IntegerField()


@extend_schema(
    request=MessageCreateSerializer,
    responses={
        201: MessageSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Post a message to a group (accepted members only).",
    tags=['messages'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send(request):
    serializer = MessageCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    message = post_message(
        group_id=serializer.validated_data['group_id'],
        sender=request.user,
        content=serializer.validated_data['content'],
    )
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[
        OpenApiParameter(name='offset', type=int, required=False, description='Messages to skip'),
        OpenApiParameter(name='limit', type=int, required=False, description='Page size'),
    ],
    responses={
        200: MessageSerializer(many=True),
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="A page of the group's messages, newest first.",
    tags=['messages'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_messages(request, group_id):
    page = MessagePageSerializer(data=request.query_params.dict())
    page.is_valid(raise_exception=True)

    messages = get_group_messages(
        group_id=group_id,
        user=request.user,
        offset=page.validated_data['offset'],
        limit=page.validated_data.get('limit'),
    )
    return Response(MessageSerializer(messages, many=True).data)


@extend_schema(
    responses={200: MessageCountResponseSerializer, 403: ErrorResponseSerializer},
    description="Number of messages in a group.",
    tags=['messages'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_count(request, group_id):
    return Response({'count': count_group_messages(group_id=group_id, user=request.user)})
