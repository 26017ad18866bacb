from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    SoleAdministratorGroupSerializer,
    InviteUsersSerializer,
    InviteResultSerializer,
    InvitationAnswerSerializer,
    InvitationSerializer,
    AdministratorFlagSerializer,
    GroupMemberSerializer,
    MemberStatusSerializer,
)

from apps.groups.services import (
    create_group,
    update_group,
    delete_group,
    get_group_for_member,
    get_user_groups,
    get_sole_administrator_groups,
    invite_users,
    respond_to_invitation,
    get_pending_invitations,
    count_pending_invitations,
    exclude_member,
    get_group_members,
    get_member_statuses,
    set_administrator,
)
from apps.ledger.services import compute_balances


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class InvitationCountResponseSerializer(drf_serializers.Serializer):
    invitationCount = drf_serializers.IntegerField()


class MessageResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()


# ==========================================
# Groups
# ==========================================

@extend_schema(
    methods=['GET'],
    responses={200: GroupSerializer(many=True)},
    description="Get all groups where the current user is an accepted member.",
    tags=['groups'],
)
@extend_schema(
    methods=['POST'],
    request=GroupCreateSerializer,
    responses={201: GroupSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Create a group. The creator becomes its first administrator.",
    tags=['groups'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def groups(request):
    """List the user's groups or create a new one."""
    if request.method == 'GET':
        serializer = GroupSerializer(get_user_groups(user=request.user), many=True)
        return Response(serializer.data)

    serializer = GroupCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data
    group = create_group(
        name=data['name'],
        creator=request.user,
        description=data.get('description', ''),
        theme=data.get('theme', ''),
        invited_pseudonyms=data.get('invited_users', []),
    )

    return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['GET'],
    responses={200: GroupSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Get a group the user is a member of.",
    tags=['groups'],
)
@extend_schema(
    methods=['PATCH'],
    request=GroupUpdateSerializer,
    responses={200: GroupSerializer, 403: ErrorResponseSerializer},
    description="Update group details (administrators only).",
    tags=['groups'],
)
@extend_schema(
    methods=['DELETE'],
    responses={204: None, 403: ErrorResponseSerializer},
    description="Delete a group with all its expenses and messages (administrators only).",
    tags=['groups'],
)
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def group_detail(request, group_id):
    """Retrieve, update or delete a single group."""
    if request.method == 'GET':
        group = get_group_for_member(group_id=group_id, user=request.user)
        return Response(GroupSerializer(group).data)

    if request.method == 'DELETE':
        delete_group(group_id=group_id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = GroupUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    group = update_group(group_id=group_id, user=request.user, **serializer.validated_data)
    return Response(GroupSerializer(group).data)


@extend_schema(
    responses={200: SoleAdministratorGroupSerializer(many=True)},
    description=(
        "Groups where the current user is the only administrator while other "
        "members remain. Account deletion is refused while this list is not empty."
    ),
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sole_administrator_groups(request):
    groups_qs = get_sole_administrator_groups(user=request.user)
    return Response(SoleAdministratorGroupSerializer(groups_qs, many=True).data)


# ==========================================
# Invitations
# ==========================================

@extend_schema(
    request=InviteUsersSerializer,
    responses={
        201: InviteResultSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description=(
        "Invite users by pseudonym (administrators only). Users already invited "
        "or already members are reported under 'skipped'."
    ),
    tags=['memberships'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invite(request):
    serializer = InviteUsersSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    created, skipped = invite_users(
        group_id=serializer.validated_data['group_id'],
        invited_by=request.user,
        pseudonyms=serializer.validated_data['invited_users'],
    )

    return Response(
        {
            'invited': [membership.user.pseudonym for membership in created],
            'skipped': [user.pseudonym for user in skipped],
        },
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    methods=['GET'],
    responses={200: InvitationSerializer(many=True)},
    description="Pending invitations of the current user.",
    tags=['memberships'],
)
@extend_schema(
    methods=['POST'],
    request=InvitationAnswerSerializer,
    responses={
        200: MessageResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Accept or decline an invitation. An invitation can be answered once.",
    tags=['memberships'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invitations(request):
    """List pending invitations or answer one."""
    if request.method == 'GET':
        pending = get_pending_invitations(user=request.user)
        return Response(InvitationSerializer(pending, many=True).data)

    serializer = InvitationAnswerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    accept = serializer.validated_data['accept_invitation']
    respond_to_invitation(
        group_id=serializer.validated_data['group_id'],
        user=request.user,
        accept=accept,
    )

    message = 'Invitation accepted' if accept else 'Invitation declined'
    return Response({'message': message})


@extend_schema(
    responses={200: InvitationCountResponseSerializer},
    description="Number of pending invitations of the current user.",
    tags=['memberships'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invitation_count(request):
    return Response({'invitationCount': count_pending_invitations(user=request.user)})


# ==========================================
# Members
# ==========================================

@extend_schema(
    methods=['PUT'],
    request=AdministratorFlagSerializer,
    responses={
        200: GroupMemberSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Grant or revoke administrator rights (administrators only).",
    tags=['memberships'],
)
@extend_schema(
    methods=['DELETE'],
    responses={
        204: None,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description=(
        "Exclude a member or revoke an invitation (administrators only). "
        "Members may remove themselves to leave the group."
    ),
    tags=['memberships'],
)
@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def membership_detail(request, group_id, user_id):
    """Change a member's administrator flag or remove the member."""
    if request.method == 'DELETE':
        exclude_member(group_id=group_id, user_id=user_id, excluded_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AdministratorFlagSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    membership = set_administrator(
        group_id=group_id,
        user_id=user_id,
        is_administrator=serializer.validated_data['is_administrator'],
        updated_by=request.user,
    )
    return Response(GroupMemberSerializer(membership).data)


@extend_schema(
    responses={200: GroupMemberSerializer(many=True), 403: ErrorResponseSerializer},
    description="Accepted members of a group.",
    tags=['memberships'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def group_members(request, group_id):
    memberships = get_group_members(group_id=group_id, user=request.user)
    return Response(GroupMemberSerializer(memberships, many=True).data)


@extend_schema(
    responses={200: MemberStatusSerializer(many=True), 403: ErrorResponseSerializer},
    description="Every membership of a group, pending invitations included, with balances.",
    tags=['memberships'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def member_statuses(request, group_id):
    memberships = get_member_statuses(group_id=group_id, user=request.user)
    balances = compute_balances(group_id=group_id)

    serializer = MemberStatusSerializer(
        memberships,
        many=True,
        context={'balances': balances}
    )
    return Response(serializer.data)
