import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.services import record_purchase
from apps.menu.models import MenuItem


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def shop_admin(db):
    """Create a back-office admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        username='admin',
    )


@pytest.fixture
def admin_client(api_client, shop_admin):
    """Return API client authenticated as the admin."""
    refresh = RefreshToken.for_user(shop_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Menu
# =============================================================================

@pytest.fixture
def mojito(db):
    """Create a mojito priced at 50."""
    return MenuItem.objects.create(
        name='Classic Mojito',
        category='Mojito',
        price=Decimal('50.00'),
    )


@pytest.fixture
def orange_juice(db):
    """Create an orange juice priced at 70."""
    return MenuItem.objects.create(
        name='Orange Juice',
        category='Juice',
        price=Decimal('70.00'),
    )


# =============================================================================
# Purchases
# =============================================================================

@pytest.fixture
def buy(db):
    """Factory recording paid purchases of a menu item through the ledger."""
    def _buy(item, times=1, name='Asha', phone='9000000001'):
        customer = None
        for _ in range(times):
            customer, _ = record_purchase(
                customer_name=name,
                customer_phone=phone,
                category=item.category,
                item_id=item.id,
                item_name=item.name,
                price=item.price,
            )
        return customer
    return _buy


@pytest.fixture
def mojito_regular(buy, mojito):
    """A customer with five paid mojitos: one reward ready."""
    return buy(mojito, times=5)
