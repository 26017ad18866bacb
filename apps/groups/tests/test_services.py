"""
Service layer unit tests for groups app.

Tests cover:
- Membership state machine (invite, accept, decline)
- Administrator rules
- Exclusion and leaving
- Error handling
"""

import pytest
from uuid import uuid4

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus
from apps.groups.services import (
    create_group,
    get_group_for_member,
    get_user_groups,
    get_sole_administrator_groups,
    update_group,
    delete_group,
    invite_users,
    respond_to_invitation,
    get_pending_invitations,
    count_pending_invitations,
    exclude_member,
    get_group_members,
    get_member_statuses,
    set_administrator,
)
from apps.groups.services.exceptions import (
    GroupNotFoundError,
    UserNotFoundError,
    NotMemberError,
    MembershipNotFoundError,
    InvitationNotFoundError,
    InvitationAlreadyAnsweredError,
    PendingMembershipError,
    LastAdministratorError,
    InsufficientPermissionsError,
)
from apps.groups.tests.conftest import add_member


# =============================================================================
# Group Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestGroupManagement:
    """Tests for group_management.py service functions."""

    def test_create_group_makes_creator_administrator(self, admin_user):
        group = create_group(name='Trip', creator=admin_user, theme='blue')

        membership = GroupMembership.objects.get(group=group, user=admin_user)
        assert membership.status == MembershipStatus.ACCEPTED
        assert membership.is_administrator is True
        assert group.get_administrator_ids() == [admin_user.id]
        assert group.theme == 'blue'

    def test_create_group_invites_listed_users(self, admin_user, member_user, other_user):
        group = create_group(
            name='Trip',
            creator=admin_user,
            invited_pseudonyms=['bob', 'carol', 'alice'],
        )

        invited = GroupMembership.objects.filter(group=group, status=MembershipStatus.INVITED)
        assert set(invited.values_list('user__pseudonym', flat=True)) == {'bob', 'carol'}
        assert not group.has_member(member_user)

    def test_create_group_unknown_invitee_writes_nothing(self, admin_user):
        with pytest.raises(UserNotFoundError):
            create_group(name='Trip', creator=admin_user, invited_pseudonyms=['ghost'])

        assert not Group.objects.filter(name='Trip').exists()

    def test_get_group_for_member_rejects_outsider(self, group, other_user):
        with pytest.raises(NotMemberError):
            get_group_for_member(group_id=group.id, user=other_user)

    def test_get_group_for_member_rejects_pending_invitee(self, group, other_user, admin_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        with pytest.raises(NotMemberError):
            get_group_for_member(group_id=group.id, user=other_user)

    def test_get_group_for_member_unknown_group(self, admin_user):
        with pytest.raises(GroupNotFoundError):
            get_group_for_member(group_id=uuid4(), user=admin_user)

    def test_get_user_groups_only_accepted(self, group, other_user, admin_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        assert list(get_user_groups(user=admin_user)) == [group]
        assert list(get_user_groups(user=other_user)) == []

    def test_update_group_admin_only(self, group, admin_user, member_user):
        with pytest.raises(InsufficientPermissionsError):
            update_group(group_id=group.id, user=member_user, name='Hijacked')

        updated = update_group(group_id=group.id, user=admin_user, description='Rent and bills')
        assert updated.description == 'Rent and bills'
        assert updated.name == 'Flatmates'

    def test_delete_group_admin_only(self, group, admin_user, member_user):
        with pytest.raises(InsufficientPermissionsError):
            delete_group(group_id=group.id, user=member_user)

        delete_group(group_id=group.id, user=admin_user)
        assert not Group.objects.filter(id=group.id).exists()
        assert not GroupMembership.objects.filter(group_id=group.id).exists()


# =============================================================================
# Invitation Service Tests
# =============================================================================

@pytest.mark.django_db
class TestInvitations:
    """Tests for invite_management.py service functions."""

    def test_invite_creates_pending_membership(self, group, admin_user, other_user):
        created, skipped = invite_users(
            group_id=group.id,
            invited_by=admin_user,
            pseudonyms=['carol'],
        )

        assert [membership.user for membership in created] == [other_user]
        assert skipped == []
        membership = GroupMembership.objects.get(group=group, user=other_user)
        assert membership.has_pending_invitation
        assert membership.invited_by == admin_user

    def test_invite_skips_existing_members(self, group, admin_user, member_user, other_user):
        created, skipped = invite_users(
            group_id=group.id,
            invited_by=admin_user,
            pseudonyms=['bob', 'carol'],
        )

        assert [membership.user for membership in created] == [other_user]
        assert skipped == [member_user]

        created, skipped = invite_users(
            group_id=group.id,
            invited_by=admin_user,
            pseudonyms=['carol'],
        )
        assert created == []
        assert skipped == [other_user]
        assert GroupMembership.objects.filter(group=group, user=other_user).count() == 1

    def test_invite_requires_administrator(self, group, member_user, other_user):
        with pytest.raises(InsufficientPermissionsError):
            invite_users(group_id=group.id, invited_by=member_user, pseudonyms=['carol'])

    def test_invite_unknown_pseudonym_fails_whole_call(self, group, admin_user, other_user):
        with pytest.raises(UserNotFoundError):
            invite_users(group_id=group.id, invited_by=admin_user, pseudonyms=['carol', 'ghost'])

        assert not GroupMembership.objects.filter(group=group, user=other_user).exists()

    def test_invite_unknown_group(self, admin_user):
        with pytest.raises(GroupNotFoundError):
            invite_users(group_id=uuid4(), invited_by=admin_user, pseudonyms=['bob'])

    def test_accept_invitation(self, group, admin_user, other_user):
        invite_users(group_id=group.id, invited_by=admin_user, pseudonyms=['carol'])

        membership = respond_to_invitation(group_id=group.id, user=other_user, accept=True)

        assert membership.has_accepted_invitation
        assert membership.responded_at is not None
        assert membership.is_administrator is False
        assert group.has_member(other_user)

    def test_accept_twice_fails(self, group, admin_user, other_user):
        invite_users(group_id=group.id, invited_by=admin_user, pseudonyms=['carol'])
        respond_to_invitation(group_id=group.id, user=other_user, accept=True)

        with pytest.raises(InvitationAlreadyAnsweredError):
            respond_to_invitation(group_id=group.id, user=other_user, accept=True)

    def test_decline_removes_membership(self, group, admin_user, other_user):
        invite_users(group_id=group.id, invited_by=admin_user, pseudonyms=['carol'])

        respond_to_invitation(group_id=group.id, user=other_user, accept=False)

        assert not GroupMembership.objects.filter(group=group, user=other_user).exists()
        statuses = get_member_statuses(group_id=group.id, user=admin_user)
        assert other_user not in [membership.user for membership in statuses]

        with pytest.raises(InvitationNotFoundError):
            respond_to_invitation(group_id=group.id, user=other_user, accept=True)

    def test_respond_without_invitation(self, group, other_user):
        with pytest.raises(InvitationNotFoundError):
            respond_to_invitation(group_id=group.id, user=other_user, accept=True)

    def test_pending_invitations_and_count(self, group, admin_user, other_user):
        second = create_group(name='Holiday', creator=admin_user)
        invite_users(group_id=group.id, invited_by=admin_user, pseudonyms=['carol'])
        invite_users(group_id=second.id, invited_by=admin_user, pseudonyms=['carol'])

        pending = get_pending_invitations(user=other_user)
        assert {membership.group for membership in pending} == {group, second}
        assert count_pending_invitations(user=other_user) == 2
        assert count_pending_invitations(user=admin_user) == 0


# =============================================================================
# Role Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestRoleManagement:
    """Tests for role_management.py service functions."""

    def test_promote_member(self, group, admin_user, member_user):
        membership = set_administrator(
            group_id=group.id,
            user_id=member_user.id,
            is_administrator=True,
            updated_by=admin_user,
        )

        assert membership.is_administrator is True
        assert set(group.get_administrator_ids()) == {admin_user.id, member_user.id}

    def test_non_admin_cannot_promote(self, group, member_user):
        with pytest.raises(InsufficientPermissionsError):
            set_administrator(
                group_id=group.id,
                user_id=member_user.id,
                is_administrator=True,
                updated_by=member_user,
            )

    def test_cannot_promote_pending_invitee(self, group, admin_user, other_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        with pytest.raises(PendingMembershipError):
            set_administrator(
                group_id=group.id,
                user_id=other_user.id,
                is_administrator=True,
                updated_by=admin_user,
            )

    def test_cannot_revoke_last_administrator(self, group, admin_user):
        with pytest.raises(LastAdministratorError):
            set_administrator(
                group_id=group.id,
                user_id=admin_user.id,
                is_administrator=False,
                updated_by=admin_user,
            )

    def test_revoke_when_another_administrator_remains(self, group, admin_user, member_user):
        set_administrator(
            group_id=group.id,
            user_id=member_user.id,
            is_administrator=True,
            updated_by=admin_user,
        )

        membership = set_administrator(
            group_id=group.id,
            user_id=admin_user.id,
            is_administrator=False,
            updated_by=member_user,
        )

        assert membership.is_administrator is False
        assert group.get_administrator_ids() == [member_user.id]

    def test_target_without_membership(self, group, admin_user, other_user):
        with pytest.raises(MembershipNotFoundError):
            set_administrator(
                group_id=group.id,
                user_id=other_user.id,
                is_administrator=True,
                updated_by=admin_user,
            )


# =============================================================================
# Membership Management Service Tests
# =============================================================================

@pytest.mark.django_db
class TestMembershipManagement:
    """Tests for membership_management.py service functions."""

    def test_exclude_member(self, group, admin_user, member_user):
        exclude_member(group_id=group.id, user_id=member_user.id, excluded_by=admin_user)

        members = get_group_members(group_id=group.id, user=admin_user)
        assert [membership.user for membership in members] == [admin_user]

    def test_member_cannot_exclude_others(self, group, admin_user, member_user):
        with pytest.raises(InsufficientPermissionsError):
            exclude_member(group_id=group.id, user_id=admin_user.id, excluded_by=member_user)

    def test_member_can_leave(self, group, member_user):
        exclude_member(group_id=group.id, user_id=member_user.id, excluded_by=member_user)

        assert not group.has_member(member_user)

    def test_admin_can_revoke_invitation(self, group, admin_user, other_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        exclude_member(group_id=group.id, user_id=other_user.id, excluded_by=admin_user)

        assert count_pending_invitations(user=other_user) == 0

    def test_last_administrator_cannot_leave_members_behind(self, group, admin_user):
        with pytest.raises(LastAdministratorError):
            exclude_member(group_id=group.id, user_id=admin_user.id, excluded_by=admin_user)

    def test_last_member_leaving_deletes_group(self, admin_user):
        group = create_group(name='Solo', creator=admin_user)

        exclude_member(group_id=group.id, user_id=admin_user.id, excluded_by=admin_user)

        assert not Group.objects.filter(id=group.id).exists()

    def test_exclude_unknown_membership(self, group, admin_user, other_user):
        with pytest.raises(MembershipNotFoundError):
            exclude_member(group_id=group.id, user_id=other_user.id, excluded_by=admin_user)

    def test_group_members_lists_accepted_only(self, group, admin_user, member_user, other_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        members = get_group_members(group_id=group.id, user=member_user)

        assert [membership.user for membership in members] == [admin_user, member_user]

    def test_member_statuses_include_pending(self, group, admin_user, other_user):
        add_member(group, other_user, status=MembershipStatus.INVITED, invited_by=admin_user)

        statuses = {m.user.pseudonym: m for m in get_member_statuses(group_id=group.id, user=admin_user)}

        assert set(statuses) == {'alice', 'bob', 'carol'}
        assert statuses['carol'].has_pending_invitation
        assert statuses['bob'].has_accepted_invitation

    def test_members_hidden_from_outsiders(self, group, other_user):
        with pytest.raises(NotMemberError):
            get_group_members(group_id=group.id, user=other_user)


# =============================================================================
# Sole Administrator Lookup
# =============================================================================

@pytest.mark.django_db
class TestSoleAdministratorGroups:

    def test_group_with_other_members_is_listed(self, group, admin_user):
        assert list(get_sole_administrator_groups(user=admin_user)) == [group]

    def test_pending_invitee_counts_as_other_member(self, admin_user, other_user):
        group = create_group(name='Pending', creator=admin_user, invited_pseudonyms=['carol'])

        assert list(get_sole_administrator_groups(user=admin_user)) == [group]

    def test_solo_group_not_listed(self, admin_user):
        create_group(name='Solo', creator=admin_user)

        assert list(get_sole_administrator_groups(user=admin_user)) == []

    def test_group_with_second_administrator_not_listed(self, group, admin_user, member_user):
        set_administrator(
            group_id=group.id,
            user_id=member_user.id,
            is_administrator=True,
            updated_by=admin_user,
        )

        assert list(get_sole_administrator_groups(user=admin_user)) == []

    def test_regular_member_has_no_blocking_groups(self, group, member_user):
        assert list(get_sole_administrator_groups(user=member_user)) == []
