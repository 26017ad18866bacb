from rest_framework import serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    RefundFilterSerializer,
    MemberBalanceSerializer,
    SimplifiedRefundSerializer,
    DetailedRefundSerializer,
)
from .services import (
    get_group_balances,
    get_simplified_refunds,
    get_detailed_refunds,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class GroupBalancesResponseSerializer(drf_serializers.Serializer):
    balances = drf_serializers.DictField(child=drf_serializers.DecimalField(max_digits=12, decimal_places=2))
    members = MemberBalanceSerializer(many=True)


@extend_schema(
    responses={
        200: GroupBalancesResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description=(
        "Net balance of every member, recomputed from the open expenses. "
        "Former members are listed while they still owe or are owed money."
    ),
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balances(request, group_id):
    entries = get_group_balances(group_id=group_id, user=request.user)

    return Response({
        'balances': {entry['user'].pseudonym: entry['balance'] for entry in entries},
        'members': MemberBalanceSerializer(entries, many=True).data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter(
            name='simplified',
            type=bool,
            required=False,
            description='Pairwise netted records (default) or one record per expense',
        ),
    ],
    responses={
        200: SimplifiedRefundSerializer(many=True),
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description=(
        "Who owes whom within a group. With simplified=false the records follow "
        "the DetailedRefund shape, one per open expense."
    ),
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def refunds(request, group_id):
    filter_serializer = RefundFilterSerializer(data=request.query_params.dict())
    filter_serializer.is_valid(raise_exception=True)

    if filter_serializer.validated_data['simplified']:
        records = get_simplified_refunds(group_id=group_id, user=request.user)
        return Response(SimplifiedRefundSerializer(records, many=True).data)

    records = get_detailed_refunds(group_id=group_id, user=request.user)
    return Response(DetailedRefundSerializer(records, many=True).data)
