import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Shop


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return a shop admin."""
    return User.objects.create_user(
        email='admin@drinks.com',
        password='TestPass123!',
        username='admin',
    )


@pytest.fixture
def inactive_admin(db):
    """Create and return a deactivated admin."""
    return User.objects.create_user(
        email='former@drinks.com',
        password='TestPass123!',
        username='former',
        is_active=False,
    )


@pytest.fixture
def super_admin(db):
    """Create and return the shop owner account."""
    return User.objects.create_superuser(
        email='owner@drinks.com',
        password='OwnerPass123!',
        username='owner',
    )


@pytest.fixture
def authenticated_client(api_client, admin_user):
    """Return an API client authenticated as admin_user."""
    refresh = RefreshToken.for_user(admin_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def shop_profile(db):
    """Create the shop row with a custom name."""
    return Shop.objects.create(name='Citrus Corner', phone='+91 90000 00000')


@pytest.fixture
def roleless_client(db):
    """API client for an account without a back-office role."""
    user = User.objects.create_user(
        email='viewer@drinks.com',
        password='TestPass123!',
        username='viewer',
        role='',
    )
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client
