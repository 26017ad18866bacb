import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus


def add_member(group, user, *, administrator=False, status=MembershipStatus.ACCEPTED, invited_by=None):
    """Attach a user to a group without going through the invitation flow."""
    return GroupMembership.objects.create(
        group=group,
        user=user,
        status=status,
        is_administrator=administrator,
        invited_by=invited_by,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """Return a factory building an API client authenticated as a user."""
    def _client_for(user, *, scheme='Bearer'):
        client = APIClient()
        token = RefreshToken.for_user(user).access_token
        header = f'{scheme} {token}' if scheme else str(token)
        client.credentials(HTTP_AUTHORIZATION=header)
        return client
    return _client_for


@pytest.fixture
def admin_user(db):
    """Create and return the group administrator."""
    return User.objects.create_user(
        pseudonym='alice',
        email='alice@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def member_user(db):
    """Create and return a regular member."""
    return User.objects.create_user(
        pseudonym='bob',
        email='bob@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user not in any group."""
    return User.objects.create_user(
        pseudonym='carol',
        email='carol@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def group(admin_user, member_user):
    """Group administered by alice with bob as accepted member."""
    group = Group.objects.create(name='Flatmates', created_by=admin_user)
    add_member(group, admin_user, administrator=True, invited_by=admin_user)
    add_member(group, member_user, invited_by=admin_user)
    return group


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def member_client(client_for, member_user):
    return client_for(member_user)


@pytest.fixture
def other_client(client_for, other_user):
    return client_for(other_user)
