from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    ProfileUpdateSerializer,
    PasswordChangeSerializer,
    DeleteAccountSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    update_profile,
    change_password,
    delete_user_account,
)


# Response serializers for API documentation
class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    token = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _token_payload(user, message):
    refresh = RefreshToken.for_user(user)
    return {
        'message': message,
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': UserSerializer(user).data,
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive a token.",
    tags=['users'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data
    user = register_user(
        pseudonym=data['pseudonym'],
        email=data['email'],
        password=data['password'],
        firstname=data.get('firstname', ''),
        lastname=data.get('lastname', ''),
    )

    return Response(
        _token_payload(user, 'Registration successful'),
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with pseudonym and password to receive a token.",
    tags=['users'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with pseudonym and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        pseudonym=serializer.validated_data['pseudonym'],
        password=serializer.validated_data['password'],
    )

    return Response(_token_payload(user, 'Login successful'))


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['users'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    methods=['PATCH'],
    request=ProfileUpdateSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Update the current user's profile (pseudonym, names, email, IBAN).",
    tags=['users'],
)
@extend_schema(
    methods=['DELETE'],
    request=DeleteAccountSerializer,
    responses={
        200: MessageResponseSerializer,
        403: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description=(
        "Delete the current account. Refused while the user is the only "
        "administrator of a group with other members."
    ),
    tags=['users'],
)
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def current_user_account(request):
    """Update or delete the current user's account."""
    if request.method == 'DELETE':
        serializer = DeleteAccountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        delete_user_account(
            user_id=request.user.id,
            password=serializer.validated_data['password'],
        )
        return Response({'message': 'Account deleted successfully'})

    serializer = ProfileUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = update_profile(user_id=request.user.id, **serializer.validated_data)
    return Response(UserSerializer(user).data)


@extend_schema(
    request=PasswordChangeSerializer,
    responses={200: MessageResponseSerializer, 403: ErrorResponseSerializer},
    description="Change the current user's password.",
    tags=['users'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_password(request):
    """Change password after confirming the current one."""
    serializer = PasswordChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    change_password(
        user_id=request.user.id,
        current_password=serializer.validated_data['current_password'],
        new_password=serializer.validated_data['new_password'],
    )
    return Response({'message': 'Password updated successfully'})
