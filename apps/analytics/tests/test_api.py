import pytest
from datetime import date, datetime, timedelta
from unittest import mock
from django.db import DatabaseError, OperationalError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.analytics.analytics import ShopAnalytics, dashboard_drinks_until_reward
from apps.analytics.exceptions import InvalidPeriodError, StoreTimeoutError
from apps.customers.models import Customer, Order
from apps.customers.services import CustomerNotFoundError


# =============================================================================
# Dashboard Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestDashboard:
    """Tests for GET /api/analytics/dashboard/"""

    def test_dashboard_requires_auth(self, api_client):
        url = reverse('analytics:dashboard')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_dashboard_requires_shop_role(self, analytics_inactive_client):
        url = reverse('analytics:dashboard')
        response = analytics_inactive_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_dashboard_empty_shop(self, analytics_admin_client):
        url = reverse('analytics:dashboard')
        response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_customers'] == 0
        assert response.data['total_drinks_sold'] == 0
        assert response.data['recent_customers'] == []
        assert response.data['total_pages'] == 0

    def test_dashboard_counts(
        self, analytics_admin_client, add_orders, analytics_customer, analytics_other_customer
    ):
        """Five orders is one short of a six-order cycle, so it counts as upcoming."""
        add_orders(analytics_customer, [('Mojito', 'Classic Mojito', '50.00', False, 0)] * 5)
        add_orders(analytics_other_customer, [
            ('Juice', 'Orange Juice', '70.00', False, 0),
            ('Juice', 'Orange Juice', '70.00', False, 0),
        ])

        url = reverse('analytics:dashboard')
        response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_customers'] == 2
        assert response.data['total_drinks_sold'] == 7
        assert response.data['rewards_earned'] == 0
        assert response.data['upcoming_rewards'] == 1

        recent = {c['phone']: c for c in response.data['recent_customers']}
        assert recent['9000000001']['drinks_until_reward'] == 0
        assert recent['9000000002']['drinks_until_reward'] == 3

    def test_dashboard_recent_customers_paginated(self, analytics_admin_client, db):
        for index in range(7):
            Customer.objects.create(name=f'Customer {index}', phone=f'80000000{index:02d}')

        url = reverse('analytics:dashboard')
        response = analytics_admin_client.get(url, {'page': 2, 'page_size': 5})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['page'] == 2
        assert response.data['total_pages'] == 2
        assert len(response.data['recent_customers']) == 2

    def test_dashboard_invalid_page(self, analytics_admin_client):
        url = reverse('analytics:dashboard')
        response = analytics_admin_client.get(url, {'page': 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_dashboard_degrades_on_store_error(self, analytics_admin_client):
        url = reverse('analytics:dashboard')
        with mock.patch.object(
            Customer.objects, 'aggregate', side_effect=DatabaseError('gone')
        ):
            response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_customers'] == 0
        assert response.data['recent_customers'] == []


class TestDashboardDrinksUntilReward:
    """The dashboard's category-blind countdown."""

    def test_no_orders(self):
        assert dashboard_drinks_until_reward(0, 0) == 5

    def test_cycle_complete(self):
        assert dashboard_drinks_until_reward(5, 0) == 0

    def test_partial_cycle(self):
        assert dashboard_drinks_until_reward(8, 1) == 2

    def test_more_rewards_than_paid(self):
        # -5 truncates to a remainder of 0, and effective is not positive
        assert dashboard_drinks_until_reward(0, 1) == 5
        assert dashboard_drinks_until_reward(1, 1) == 9


# =============================================================================
# Earnings Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestEarnings:
    """Tests for GET /api/analytics/earnings/"""

    def test_earnings_requires_auth(self, api_client):
        url = reverse('analytics:earnings')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_month_totals(self, analytics_admin_client, window_orders):
        """Paid 50, 70 and 30 plus one reward in the window."""
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'month'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == 'month'
        assert response.data['total_earnings'] == 150.0
        assert response.data['total_orders'] == 3
        assert response.data['total_rewards'] == 1
        assert response.data['average_order_value'] == 50.0
        assert len(response.data['transactions']) == 4

    def test_all_time_includes_old_orders(self, analytics_admin_client, window_orders):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'all'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_earnings'] == 1149.0
        assert response.data['total_orders'] == 4
        assert response.data['start'] is None

    def test_default_period_is_month(self, analytics_admin_client, window_orders):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url)

        assert response.data['period'] == 'month'
        assert response.data['total_orders'] == 3

    def test_week_excludes_older_orders(
        self, analytics_admin_client, window_orders, add_orders, analytics_customer
    ):
        """An order ten days back falls in the month but not the week."""
        add_orders(analytics_customer, [('Juice', 'Apple Juice', '40.00', False, 10)])
        url = reverse('analytics:earnings')

        week = analytics_admin_client.get(url, {'period': 'week'})
        month = analytics_admin_client.get(url, {'period': 'month'})

        assert week.data['total_earnings'] == 150.0
        assert week.data['total_orders'] == 3
        assert 'Apple Juice' not in [t['item_name'] for t in week.data['transactions']]
        assert month.data['total_earnings'] == 190.0
        assert month.data['total_orders'] == 4

    def test_top_customers_and_items(
        self, analytics_admin_client, window_orders, add_orders, analytics_other_customer
    ):
        add_orders(analytics_other_customer, [('Juice', 'Orange Juice', '500.00', False, 1)])

        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'month'})

        top_customers = response.data['top_customers']
        assert top_customers[0]['phone'] == '9000000002'
        assert top_customers[0]['total_spent'] == 500.0
        assert top_customers[1]['order_count'] == 3

        top_items = response.data['top_items']
        assert top_items[0] == {
            'name': 'Orange Juice',
            'category': 'Juice',
            'total_sold': 2,
            'total_revenue': 530.0,
        }
        # Reward orders never show up as items sold
        assert all(item['name'] != 'Mojito (Reward)' for item in top_items)

    def test_daily_buckets_newest_first(self, analytics_admin_client, window_orders):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'month'})

        daily = response.data['daily_earnings']
        dates = [row['date'] for row in daily]
        assert dates == sorted(dates, reverse=True)
        assert sum(row['rewards'] for row in daily) == 1
        assert sum(row['earnings'] for row in daily) == 150.0

    def test_monthly_label(self, analytics_admin_client, add_orders, analytics_customer):
        add_orders(analytics_customer, [('Mojito', 'Classic Mojito', '50.00', False, 0)])

        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'all'})

        today = timezone.localtime().date()
        month = response.data['monthly_earnings'][0]
        assert month['key'] == today.strftime('%Y-%m')
        assert month['month'] == today.strftime('%B %Y')
        assert response.data['yearly_earnings'][0]['year'] == str(today.year)

    def test_custom_range(self, analytics_admin_client, window_orders):
        today = timezone.localtime().date()
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {
            'start_date': (today - timedelta(days=80)).isoformat(),
            'end_date': (today - timedelta(days=60)).isoformat(),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == 'custom'
        assert response.data['total_earnings'] == 999.0
        assert response.data['total_orders'] == 1

    def test_invalid_period(self, analytics_admin_client):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {'period': 'decade'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_start_after_end(self, analytics_admin_client):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url, {
            'start_date': '2026-10-10',
            'end_date': '2026-10-01',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_no_orders_average_is_zero(self, analytics_admin_client):
        url = reverse('analytics:earnings')
        response = analytics_admin_client.get(url)

        assert response.data['total_earnings'] == 0.0
        assert response.data['average_order_value'] == 0.0


# =============================================================================
# Chart Data Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestChartData:
    """Tests for GET /api/analytics/chart-data/"""

    def test_chart_data_four_days(self, analytics_admin_client, window_orders):
        url = reverse('analytics:chart-data')
        response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 4

        today = timezone.localtime().date()
        assert response.data[-1]['date'] == f"{today:%b} {today.day}"

        # Orders 1, 2 and 3 days ago fall inside the visible days
        assert sum(point['orders'] for point in response.data) == 4
        assert sum(point['earnings'] for point in response.data) == 150.0

    def test_chart_data_empty(self, analytics_admin_client):
        url = reverse('analytics:chart-data')
        response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [point['orders'] for point in response.data] == [0, 0, 0, 0]

    def test_chart_data_requires_admin(self, api_client):
        url = reverse('analytics:chart-data')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Rewards Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestRewards:
    """Tests for GET /api/rewards/"""

    def test_lookup_by_mobile_is_public(self, api_client, add_orders, analytics_customer):
        add_orders(analytics_customer, [('Juice', 'Orange Juice', '70.00', False, 0)] * 4)

        url = reverse('rewards')
        response = api_client.get(url, {'mobile': '9000000001'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Asha'
        assert response.data['total_paid_drinks'] == 4
        assert len(response.data['orders']) == 4

        juice = response.data['rewards'][0]
        assert juice['category'] == 'Juice'
        assert juice['progress'] == 4
        assert juice['status'] == 'upcoming'
        assert juice['drinks_until_reward'] == 1

    def test_lookup_unknown_mobile(self, api_client):
        url = reverse('rewards')
        response = api_client.get(url, {'mobile': '0000000000'})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'Customer not found'

    def test_lookup_store_timeout(self, api_client, analytics_customer):
        url = reverse('rewards')
        with mock.patch(
            'apps.analytics.analytics.get_customer_by_phone',
            side_effect=OperationalError('statement timeout')
        ):
            response = api_client.get(url, {'mobile': '9000000001'})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['error'] == 'Database connection timeout'

    def test_listing_requires_admin(self, api_client):
        url = reverse('rewards')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_listing_stats(
        self, analytics_admin_client, add_orders, analytics_customer, analytics_other_customer
    ):
        add_orders(analytics_customer, [('Mojito', 'Classic Mojito', '50.00', False, 0)] * 5)
        add_orders(analytics_other_customer, [('Juice', 'Orange Juice', '70.00', False, 0)] * 4)

        url = reverse('rewards')
        response = analytics_admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['customers']) == 2
        assert response.data['stats'] == {
            'total_rewards_given': 0,
            'customers_with_rewards': 0,
            'ready_rewards': 1,
            'upcoming_rewards': 1,
        }


# =============================================================================
# ShopAnalytics Unit Tests
# =============================================================================

@pytest.mark.django_db
class TestShopAnalytics:
    """Direct tests of report queries."""

    def test_resolve_window_rejects_unknown_period(self):
        with pytest.raises(InvalidPeriodError):
            ShopAnalytics.resolve_window('fortnight')

    def test_resolve_window_all_is_open(self):
        assert ShopAnalytics.resolve_window('all') == (None, None)

    def test_resolve_window_month_clamps_day(self):
        now = timezone.make_aware(datetime(2026, 3, 31, 12, 0))
        start, end = ShopAnalytics.resolve_window('month', now=now)

        assert timezone.localtime(start).date() == date(2026, 2, 28)
        assert end == timezone.localtime(now)

    def test_resolve_window_dates_override_period(self):
        start, end = ShopAnalytics.resolve_window(
            'today', start_date=date(2026, 10, 1), end_date=date(2026, 10, 2)
        )

        assert timezone.localtime(start).date() == date(2026, 10, 1)
        assert timezone.localtime(end).date() == date(2026, 10, 2)

    def test_resolve_window_today_starts_at_local_midnight(self):
        now = timezone.make_aware(datetime(2026, 10, 19, 15, 30))
        start, end = ShopAnalytics.resolve_window('today', now=now)

        assert start == timezone.make_aware(datetime(2026, 10, 19))
        assert end == now

    def test_resolve_window_week_is_seven_days(self):
        now = timezone.make_aware(datetime(2026, 10, 19, 15, 30))
        start, end = ShopAnalytics.resolve_window('week', now=now)

        assert end - start == timedelta(days=7)
        assert timezone.localtime(start).date() == date(2026, 10, 12)

    def test_resolve_window_year_clamps_leap_day(self):
        now = timezone.make_aware(datetime(2028, 2, 29, 9, 0))
        start, end = ShopAnalytics.resolve_window('year', now=now)

        assert timezone.localtime(start).date() == date(2027, 2, 28)
        assert timezone.localtime(start).hour == 9
        assert end == now

    def test_business_stats(self, window_orders):
        stats = ShopAnalytics.business_stats()

        assert stats == {
            'total_customers': 1,
            'total_orders': 5,
            'total_revenue': 1149.0,
            'rewards_given': 1,
        }

    def test_customer_summary(self, add_orders, analytics_customer):
        add_orders(analytics_customer, [('Mojito', 'Classic Mojito', '50.00', False, 0)] * 7)

        summary = ShopAnalytics.customer_summary('9000000001')

        assert summary['total_drinks'] == 7
        assert summary['rewards_earned'] == 0
        assert summary['upcoming_reward'] == 1
        assert summary['drinks_to_next_reward'] == 3
        assert summary['last_order_date'] is not None

    def test_customer_summary_unknown_phone(self):
        with pytest.raises(CustomerNotFoundError):
            ShopAnalytics.customer_summary('123')

    def test_category_drinks(self, window_orders, analytics_customer):
        report = ShopAnalytics.category_drinks(analytics_customer.id, 'Mojito')

        assert report['total_orders'] == 4
        assert report['paid_orders'] == 3
        assert report['reward_orders'] == 1
        assert [order['sequence'] for order in report['orders']] == [1, 2, 4, 5]

    def test_category_drinks_store_timeout(self, analytics_customer):
        with mock.patch(
            'apps.analytics.analytics.get_customer',
            side_effect=OperationalError('statement timeout')
        ):
            with pytest.raises(StoreTimeoutError):
                ShopAnalytics.category_drinks(analytics_customer.id, 'Mojito')



# =============================================================================
# Store Failure Tests
# =============================================================================

@pytest.mark.django_db
class TestReportsDegradeOnStoreError:
    """Dashboard-type reports answer with zeroed payloads when the store fails."""

    def test_earnings(self, window_orders):
        with mock.patch.object(
            Order.objects, 'select_related', side_effect=DatabaseError('gone')
        ):
            report = ShopAnalytics.earnings('all')

        assert report['total_earnings'] == 0.0
        assert report['total_orders'] == 0
        assert report['transactions'] == []
        assert report['top_customers'] == []

    def test_earnings_endpoint(self, analytics_admin_client, window_orders):
        url = reverse('analytics:earnings')
        with mock.patch.object(
            Order.objects, 'select_related', side_effect=DatabaseError('gone')
        ):
            response = analytics_admin_client.get(url, {'period': 'month'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_earnings'] == 0.0
        assert response.data['daily_earnings'] == []

    def test_rewards_overview(self, window_orders):
        with mock.patch.object(
            Customer.objects, 'annotate', side_effect=DatabaseError('gone')
        ):
            overview = ShopAnalytics.rewards_overview()

        assert overview == {
            'customers': [],
            'stats': {
                'total_rewards_given': 0,
                'customers_with_rewards': 0,
                'ready_rewards': 0,
                'upcoming_rewards': 0,
            },
        }

    def test_chart_data(self, window_orders):
        with mock.patch.object(
            Order.objects, 'filter', side_effect=DatabaseError('gone')
        ):
            assert ShopAnalytics.chart_data() == []

    def test_business_stats(self, window_orders):
        with mock.patch.object(
            Customer.objects, 'aggregate', side_effect=DatabaseError('gone')
        ):
            stats = ShopAnalytics.business_stats()

        assert stats == {
            'total_customers': 0,
            'total_orders': 0,
            'total_revenue': 0.0,
            'rewards_given': 0,
        }

    def test_invalid_period_still_raises(self):
        with pytest.raises(InvalidPeriodError):
            ShopAnalytics.earnings('decade')

# =============================================================================
# Health Check Tests
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_healthy(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok', 'database': 'ok'}

    def test_database_unavailable(self, api_client):
        """Store outage answers 503 instead of a server error."""
        with mock.patch('config.views.connection') as connection:
            connection.cursor.side_effect = OperationalError('could not connect')
            response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()['database'] == 'unavailable'
