import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer, Order, RewardCounter
from apps.customers.rewards import earned_for
from apps.menu.models import MenuItem


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_admin(db):
    """Create the back-office admin for analytics tests."""
    return User.objects.create_user(
        email='analytics_admin@example.com',
        password='TestPass123!',
        username='analytics_admin',
    )


@pytest.fixture
def analytics_admin_client(api_client, analytics_admin):
    """Return API client authenticated as the admin."""
    refresh = RefreshToken.for_user(analytics_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def analytics_inactive_client(api_client, db):
    """Return API client authenticated as an account without a shop role."""
    user = User.objects.create_user(
        email='analytics_nobody@example.com',
        password='TestPass123!',
        username='analytics_nobody',
        role='',
    )
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Menu
# =============================================================================

@pytest.fixture
def analytics_mojito(db):
    """Create a mojito menu item."""
    return MenuItem.objects.create(
        name='Classic Mojito',
        category='Mojito',
        price=Decimal('50.00'),
    )


@pytest.fixture
def analytics_juice(db):
    """Create a juice menu item."""
    return MenuItem.objects.create(
        name='Orange Juice',
        category='Juice',
        price=Decimal('70.00'),
    )


# =============================================================================
# Orders
# =============================================================================

@pytest.fixture
def add_orders(db):
    """
    Factory writing a customer's order history directly, with explicit dates.

    Each row is (category, item_name, price, is_reward, days_ago). Counters
    and the customer's totals are kept consistent with the orders.
    """
    def _add(customer, rows, item=None):
        now = timezone.now()
        sequence = customer.orders.count()
        for category, item_name, price, is_reward, days_ago in rows:
            sequence += 1
            Order.objects.create(
                customer=customer,
                sequence=sequence,
                drink_type=category,
                item_name=item_name,
                item=None if is_reward else item,
                price=Decimal('0.00') if is_reward else Decimal(price),
                date=now - timedelta(days=days_ago),
                is_reward=is_reward,
            )
            counter, _ = RewardCounter.objects.get_or_create(customer=customer, category=category)
            if is_reward:
                counter.claimed += 1
                customer.rewards_earned += 1
            else:
                counter.paid += 1
                counter.earned = earned_for(counter.paid)
            counter.save()

        customer.total_orders = sequence
        customer.save()
        return customer
    return _add


@pytest.fixture
def analytics_customer(db):
    """Create a customer without orders."""
    return Customer.objects.create(name='Asha', phone='9000000001')


@pytest.fixture
def analytics_other_customer(db):
    """Create a second customer without orders."""
    return Customer.objects.create(name='Ravi', phone='9000000002')


@pytest.fixture
def window_orders(add_orders, analytics_customer, analytics_mojito):
    """
    Orders inside this month's window: paid 50, 70 and 30 plus one reward,
    and one paid order two months back.
    """
    return add_orders(analytics_customer, [
        ('Mojito', 'Classic Mojito', '50.00', False, 1),
        ('Mojito', 'Mint Mojito', '70.00', False, 2),
        ('Juice', 'Orange Juice', '30.00', False, 3),
        ('Mojito', 'Mojito (Reward)', '0', True, 1),
        ('Mojito', 'Classic Mojito', '999.00', False, 70),
    ], item=analytics_mojito)
