from decimal import Decimal

from rest_framework import serializers
from .models import Group, GroupMembership


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    administrators = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'theme',
            'created_at',
            'administrators',
        ]
        read_only_fields = fields

    def get_administrators(self, obj):
        """Ids of accepted administrators."""
        return [str(user_id) for user_id in obj.get_administrator_ids()]


class GroupCreateSerializer(serializers.Serializer):
    """Serializer for creating groups."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    theme = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    invited_users = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
        default=list
    )

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Group name cannot be blank')
        return value


class GroupUpdateSerializer(serializers.Serializer):
    """Partial group update; omitted fields are left untouched."""

    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    theme = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Group name cannot be blank')
        return value


class SoleAdministratorGroupSerializer(serializers.ModelSerializer):
    """Group that blocks account deletion."""

    class Meta:
        model = Group
        fields = ['id', 'name']
        read_only_fields = fields


class InviteUsersSerializer(serializers.Serializer):
    """Serializer for inviting users by pseudonym."""

    group_id = serializers.UUIDField()
    invited_users = serializers.ListField(
        child=serializers.CharField(max_length=50),
        min_length=1
    )


class InvitationAnswerSerializer(serializers.Serializer):
    """Serializer for accepting or declining an invitation."""

    group_id = serializers.UUIDField()
    accept_invitation = serializers.BooleanField()


class InvitationSerializer(serializers.ModelSerializer):
    """Pending invitation with the group it leads to."""

    group = GroupSerializer(read_only=True)
    invited_by = serializers.SerializerMethodField()

    class Meta:
        model = GroupMembership
        fields = ['group', 'invited_by', 'invited_at']
        read_only_fields = fields

    def get_invited_by(self, obj):
        if obj.invited_by is None:
            return None
        return obj.invited_by.get_display_name()


class AdministratorFlagSerializer(serializers.Serializer):
    """Serializer for granting or revoking administrator rights."""

    is_administrator = serializers.BooleanField()


class GroupMemberSerializer(serializers.ModelSerializer):
    """Member profile flattened with its membership flags."""

    id = serializers.UUIDField(source='user.id', read_only=True)
    pseudonym = serializers.CharField(source='user.pseudonym', read_only=True)
    firstname = serializers.CharField(source='user.firstname', read_only=True)
    lastname = serializers.CharField(source='user.lastname', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    iban = serializers.CharField(source='user.iban', read_only=True)

    class Meta:
        model = GroupMembership
        fields = [
            'id',
            'pseudonym',
            'firstname',
            'lastname',
            'email',
            'iban',
            'is_administrator',
            'has_accepted_invitation',
        ]
        read_only_fields = fields


class MemberStatusSerializer(GroupMemberSerializer):
    """
    Membership state plus the member's current balance.

    Expects ``balances`` ({user_id: Decimal}) in the serializer context.
    """

    balance = serializers.SerializerMethodField()

    class Meta(GroupMemberSerializer.Meta):
        fields = GroupMemberSerializer.Meta.fields + [
            'has_pending_invitation',
            'balance',
        ]
        read_only_fields = fields

    def get_balance(self, obj):
        balances = self.context.get('balances', {})
        return balances.get(obj.user_id, Decimal('0.00'))


class InviteResultSerializer(serializers.Serializer):
    invited = serializers.ListField(child=serializers.CharField())
    skipped = serializers.ListField(child=serializers.CharField())
