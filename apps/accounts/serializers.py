from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Full profile of the authenticated user."""

    class Meta:
        model = User
        fields = [
            'id',
            'pseudonym',
            'firstname',
            'lastname',
            'email',
            'iban',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserPublicSerializer(serializers.ModelSerializer):
    """Profile fields other group members may see."""

    class Meta:
        model = User
        fields = ['id', 'pseudonym', 'firstname', 'lastname', 'email', 'iban']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """Validate registration input; the service creates the user."""

    pseudonym = serializers.CharField(max_length=50)
    email = serializers.EmailField(max_length=255)
    firstname = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    lastname = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    confirmPassword = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate_pseudonym(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Pseudonym cannot be blank')
        return value

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['confirmPassword']:
            raise serializers.ValidationError({
                'confirmPassword': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    pseudonym = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class ProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; omitted fields are left untouched."""

    pseudonym = serializers.CharField(max_length=50, required=False)
    email = serializers.EmailField(max_length=255, required=False)
    firstname = serializers.CharField(max_length=100, required=False, allow_blank=True)
    lastname = serializers.CharField(max_length=100, required=False, allow_blank=True)
    iban = serializers.CharField(max_length=42, required=False, allow_blank=True)


class PasswordChangeSerializer(serializers.Serializer):
    """Serializer for password change."""

    current_password = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )
    new_password = serializers.CharField(
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    confirm_password = serializers.CharField(
        required=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({
                'confirm_password': 'Passwords do not match'
            })
        return attrs


class DeleteAccountSerializer(serializers.Serializer):
    """Account deletion needs the current password."""

    password = serializers.CharField(style={'input_type': 'password'})
