import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, MembershipStatus


def make_user(pseudonym):
    return User.objects.create_user(
        pseudonym=pseudonym,
        email=f'{pseudonym}@example.com',
        password='TestPass123!',
    )


def add_member(group, user, *, administrator=False, status=MembershipStatus.ACCEPTED):
    return GroupMembership.objects.create(
        group=group,
        user=user,
        status=status,
        is_administrator=administrator,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """Return a factory building an API client authenticated as a user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def alice(db):
    return make_user('alice')


@pytest.fixture
def bob(db):
    return make_user('bob')


@pytest.fixture
def carol(db):
    return make_user('carol')


@pytest.fixture
def group(alice, bob):
    """Group administered by alice with bob as accepted member."""
    group = Group.objects.create(name='Flatmates', created_by=alice)
    add_member(group, alice, administrator=True)
    add_member(group, bob)
    return group


@pytest.fixture
def alice_client(client_for, alice):
    return client_for(alice)


@pytest.fixture
def bob_client(client_for, bob):
    return client_for(bob)


@pytest.fixture
def carol_client(client_for, carol):
    return client_for(carol)
