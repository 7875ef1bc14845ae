import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.menu.models import MenuItem


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def menu_admin(db):
    """Create a back-office admin."""
    return User.objects.create_user(
        email='menu_admin@example.com',
        password='TestPass123!',
        username='menu_admin',
    )


@pytest.fixture
def menu_admin_client(api_client, menu_admin):
    """Return API client authenticated as the admin."""
    refresh = RefreshToken.for_user(menu_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def mojito(db):
    return MenuItem.objects.create(
        name='Mint Mojito',
        category='Mojito',
        price=Decimal('249.00'),
        description='Fresh mint, lime and soda',
    )


@pytest.fixture
def mango_juice(db):
    return MenuItem.objects.create(
        name='Mango Tango Juice',
        category='Juice',
        price=Decimal('129.00'),
    )


@pytest.fixture
def retired_smoothie(db):
    """An item taken off the menu."""
    return MenuItem.objects.create(
        name='Kiwi Smoothie',
        category='Smoothie',
        price=Decimal('199.00'),
        is_active=False,
    )


@pytest.fixture
def media_root(settings, tmp_path):
    """Store uploads in a temporary directory."""
    settings.MEDIA_ROOT = tmp_path
    return tmp_path
