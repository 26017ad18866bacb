from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    ExpenseSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
)
from .services import (
    create_expense,
    get_group_expenses,
    get_expense,
    update_expense,
    delete_expense,
    delete_attachment,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


@extend_schema(
    request=ExpenseCreateSerializer,
    responses={
        201: ExpenseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description=(
        "Record an expense paid by the current user. Without refund_recipients "
        "the amount is split among every accepted member."
    ),
    tags=['expenses'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create(request):
    serializer = ExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data
    expense = create_expense(
        group_id=data['group_id'],
        creator=request.user,
        title=data['title'],
        amount=data['amount'],
        category=data.get('category'),
        refund_recipients=data.get('refund_recipients'),
        attachment=data.get('attachment'),
        date=data.get('date'),
    )

    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: ExpenseSerializer(many=True), 403: ErrorResponseSerializer},
    description="Expenses of a group, newest first.",
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_expenses(request, group_id):
    expenses = get_group_expenses(group_id=group_id, user=request.user)
    return Response(ExpenseSerializer(expenses, many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: ExpenseSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Get a single expense.",
    tags=['expenses'],
)
@extend_schema(
    methods=['PATCH'],
    request=ExpenseUpdateSerializer,
    responses={
        200: ExpenseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Update an expense (creator only). isRefunded marks it settled.",
    tags=['expenses'],
)
@extend_schema(
    methods=['DELETE'],
    responses={204: None, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Delete an expense (creator only).",
    tags=['expenses'],
)
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def expense_detail(request, group_id, expense_id):
    """Retrieve, update or delete an expense."""
    if request.method == 'GET':
        expense = get_expense(group_id=group_id, expense_id=expense_id, user=request.user)
        return Response(ExpenseSerializer(expense).data)

    if request.method == 'DELETE':
        delete_expense(group_id=group_id, expense_id=expense_id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ExpenseUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    expense = update_expense(
        group_id=group_id,
        expense_id=expense_id,
        user=request.user,
        **serializer.validated_data
    )
    return Response(ExpenseSerializer(expense).data)


@extend_schema(
    responses={200: ExpenseSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Remove the attachment of an expense (creator only).",
    tags=['expenses'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_attachment(request, group_id, expense_id):
    expense = delete_attachment(group_id=group_id, expense_id=expense_id, user=request.user)
    return Response(ExpenseSerializer(expense).data)
