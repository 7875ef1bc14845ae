"""
Analytics Module
=================

This module provides the read-side reports of the shop: dashboard summary,
loyalty reward listing, earnings breakdowns, chart data and per-customer
summaries. Every report is recomputed from orders and reward counters on
each request.

Classes:
    ShopAnalytics: Static methods for the shop's reports.

Key Features:
    - Dashboard summary with recently active customers
    - Per-category reward progress for every customer
    - Earnings by day, month and year with top customers and items
    - Last-days chart data for the admin dashboard
    - Customer-facing summaries looked up by phone number

Example:
    Getting this month's earnings::

        from apps.analytics.analytics import ShopAnalytics

        report = ShopAnalytics.earnings(period='month')
        print(f"Earned {report['total_earnings']} from {report['total_orders']} orders")

Note:
    This module is read-only and doesn't modify any data. Dashboard reports
    degrade to zeroed results when the store fails, so dashboards always
    render; lookups for a single customer raise instead.
"""

import functools
import logging
import math
from calendar import monthrange
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError, OperationalError
from django.db.models import Count, Q, Sum
from django.db.models.functions import Mod
from django.utils import timezone

from apps.customers.models import Customer, Order
from apps.customers.rewards import REWARD_THRESHOLD
from apps.customers.services import get_customer, get_customer_by_phone
from .exceptions import InvalidPeriodError, StoreTimeoutError

logger = logging.getLogger(__name__)

EARNINGS_PERIODS = ('today', 'week', 'month', 'year', 'all')
TOP_LIMIT = 10
CHART_DAYS = 7
CHART_VISIBLE_DAYS = 4
# Dashboard heuristic: a customer whose order count sits one short of a
# six-order cycle is about to get a free drink
DASHBOARD_CYCLE = REWARD_THRESHOLD + 1


def degrade_to(empty):
    """
    Return empty() instead of raising when the store fails.

    Args:
        empty: Callable producing the zeroed result
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError:
                logger.exception("%s failed, returning empty result", func.__name__)
                return empty()
        return wrapper
    return decorator


def raise_store_timeout(func):
    """Translate store failures in single-customer lookups into StoreTimeoutError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationalError as e:
            logger.exception("%s failed", func.__name__)
            raise StoreTimeoutError("Database connection timeout") from e
    return wrapper


def _money(value) -> float:
    return float(value or 0)


def _months_ago(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the month's last day."""
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _start_of_day(day) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _end_of_day(day) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max))


def dashboard_drinks_until_reward(paid_orders: int, rewards_earned: int) -> int:
    """
    Drinks until the next reward, from a customer's aggregate counts.

    Category-blind approximation shown on the dashboard; the remainder
    truncates toward zero for customers with more rewards than paid drinks.
    """
    effective = paid_orders - rewards_earned * REWARD_THRESHOLD
    remainder = int(math.fmod(effective, REWARD_THRESHOLD))
    if remainder == 0 and effective > 0:
        return 0
    return REWARD_THRESHOLD - remainder


def _order_record(order: Order) -> dict:
    return {
        'id': str(order.id),
        'sequence': order.sequence,
        'drink_type': order.drink_type,
        'item_name': order.item_name,
        'item_id': str(order.item_id) if order.item_id else None,
        'price': _money(order.price),
        'date': order.date.isoformat(),
        'is_reward': order.is_reward,
        'claimed': order.claimed,
    }


def _empty_dashboard():
    return {
        'total_customers': 0,
        'total_drinks_sold': 0,
        'rewards_earned': 0,
        'upcoming_rewards': 0,
        'recent_customers': [],
        'page': 1,
        'page_size': settings.DASHBOARD_RECENT_CUSTOMERS,
        'total_pages': 0,
    }


def _empty_rewards():
    return {
        'customers': [],
        'stats': {
            'total_rewards_given': 0,
            'customers_with_rewards': 0,
            'ready_rewards': 0,
            'upcoming_rewards': 0,
        },
    }


def _empty_earnings():
    return {
        'period': None,
        'start': None,
        'end': None,
        'total_earnings': 0.0,
        'total_orders': 0,
        'total_rewards': 0,
        'average_order_value': 0.0,
        'top_customers': [],
        'top_items': [],
        'daily_earnings': [],
        'monthly_earnings': [],
        'yearly_earnings': [],
        'transactions': [],
    }


def _empty_business_stats():
    return {
        'total_customers': 0,
        'total_orders': 0,
        'total_revenue': 0.0,
        'rewards_given': 0,
    }


class ShopAnalytics:
    """
    Report queries for the admin back-office and the customer lookup pages.

    Methods:
        dashboard_summary: Headline counts plus recently active customers.
        rewards_overview: Per-category reward progress of every customer.
        customer_rewards: One customer's reward progress and orders, by phone.
        earnings: Earnings report over a time window.
        chart_data: Orders and earnings for the most recent days.
        business_stats: Lifetime totals for the admin profile page.
        customer_summary: Aggregate reward progress of one customer, by phone.
        category_drinks: One customer's orders in one category.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def resolve_window(period='month', start_date=None, end_date=None, now=None):
        """
        Turn a named period or explicit dates into an aware datetime window.

        Explicit dates take precedence over the period. Dates are whole local
        days: start_date from midnight, end_date until the end of the day.

        Args:
            period (str): 'today', 'week', 'month', 'year' or 'all'.
            start_date (date, optional): First day included.
            end_date (date, optional): Last day included.
            now (datetime, optional): Reference time, defaults to now.

        Returns:
            tuple: (start, end), either of which may be None for open bounds.

        Raises:
            InvalidPeriodError: If period is not a known name.
        """
        now = timezone.localtime(now or timezone.now())
        if period not in EARNINGS_PERIODS:
            raise InvalidPeriodError(f"Invalid period: {period!r}")

        if start_date or end_date:
            start = _start_of_day(start_date) if start_date else None
            end = _end_of_day(end_date) if end_date else now
            return start, end

        if period == 'all':
            return None, None
        if period == 'today':
            return now.replace(hour=0, minute=0, second=0, microsecond=0), now
        if period == 'week':
            return now - timedelta(days=7), now
        if period == 'year':
            return _months_ago(now, 12), now
        return _months_ago(now, 1), now

    @staticmethod
    @degrade_to(_empty_dashboard)
    def dashboard_summary(page=1, page_size=None):
        """
        Headline numbers for the admin dashboard.

        Args:
            page (int): 1-based page of recent customers.
            page_size (int, optional): Customers per page, defaults to
                DASHBOARD_RECENT_CUSTOMERS.

        Returns:
            dict: A dictionary containing:
                - total_customers (int)
                - total_drinks_sold (int): Sum of customers' order counts.
                - rewards_earned (int): Sum of redeemed rewards.
                - upcoming_rewards (int): Customers whose order count is one
                  short of a six-order cycle.
                - recent_customers (list): Most recently active customers with
                  drinks_until_reward from aggregate counts.
                - page, page_size, total_pages (int)
        """
        page_size = page_size or settings.DASHBOARD_RECENT_CUSTOMERS
        page = max(page, 1)

        totals = Customer.objects.aggregate(
            total_customers=Count('id'),
            total_drinks_sold=Sum('total_orders', default=0),
            rewards_earned=Sum('rewards_earned', default=0),
        )
        upcoming = (
            Customer.objects
            .annotate(cycle_position=Mod('total_orders', DASHBOARD_CYCLE))
            .filter(cycle_position=DASHBOARD_CYCLE - 1)
            .count()
        )

        offset = (page - 1) * page_size
        recent = (
            Customer.objects
            .annotate(paid_orders=Count('orders', filter=Q(orders__is_reward=False)))
            .order_by('-updated_at')[offset:offset + page_size]
        )

        total_customers = totals['total_customers']
        return {
            'total_customers': total_customers,
            'total_drinks_sold': totals['total_drinks_sold'],
            'rewards_earned': totals['rewards_earned'],
            'upcoming_rewards': upcoming,
            'recent_customers': [
                {
                    'id': str(customer.id),
                    'name': customer.name,
                    'phone': customer.phone,
                    'total_orders': customer.total_orders,
                    'drinks_until_reward': dashboard_drinks_until_reward(
                        customer.paid_orders, customer.rewards_earned
                    ),
                }
                for customer in recent
            ],
            'page': page,
            'page_size': page_size,
            'total_pages': math.ceil(total_customers / page_size) if total_customers else 0,
        }

    @staticmethod
    def _customer_rewards_record(customer, paid_orders, include_orders=False):
        record = {
            'id': str(customer.id),
            'name': customer.name,
            'phone': customer.phone,
            'total_orders': customer.total_orders,
            'total_paid_drinks': paid_orders,
            'total_rewards_earned': customer.rewards_earned,
            'rewards': customer.reward_records(),
        }
        if include_orders:
            record['orders'] = [
                _order_record(order) for order in customer.orders.order_by('sequence')
            ]
        return record

    @staticmethod
    @degrade_to(_empty_rewards)
    def rewards_overview():
        """
        Reward progress for every customer and every category they bought in.

        Returns:
            dict: A dictionary containing:
                - customers (list): Per customer, the derived record of each
                  category (paid, earned, claimed, pending, progress,
                  drinks_until_reward, status).
                - stats (dict):
                    - total_rewards_given (int): Sum of redeemed rewards.
                    - customers_with_rewards (int): Customers with a redemption.
                    - ready_rewards (int): Pending rewards over "ready" categories.
                    - upcoming_rewards (int): Number of "upcoming" categories.
        """
        customers = (
            Customer.objects
            .annotate(paid_orders=Count('orders', filter=Q(orders__is_reward=False)))
            .prefetch_related('reward_counters')
            .order_by('-updated_at')
        )

        records = []
        ready = 0
        upcoming = 0
        total_given = 0
        with_rewards = 0

        for customer in customers:
            record = ShopAnalytics._customer_rewards_record(customer, customer.paid_orders)
            records.append(record)

            total_given += customer.rewards_earned
            if customer.rewards_earned > 0:
                with_rewards += 1
            for category in record['rewards']:
                if category['status'] == 'ready':
                    ready += category['pending']
                elif category['status'] == 'upcoming':
                    upcoming += 1

        return {
            'customers': records,
            'stats': {
                'total_rewards_given': total_given,
                'customers_with_rewards': with_rewards,
                'ready_rewards': ready,
                'upcoming_rewards': upcoming,
            },
        }

    @staticmethod
    @raise_store_timeout
    def customer_rewards(phone):
        """
        One customer's reward progress and order history, looked up by phone.

        Raises:
            CustomerNotFoundError: If no customer has this phone.
            StoreTimeoutError: If the store does not answer.
        """
        customer = get_customer_by_phone(phone=phone)
        paid_orders = customer.orders.filter(is_reward=False).count()
        return ShopAnalytics._customer_rewards_record(customer, paid_orders, include_orders=True)

    @staticmethod
    @degrade_to(_empty_earnings)
    def earnings(period='month', start_date=None, end_date=None):
        """
        Earnings report over a time window.

        Reward orders are tallied in total_rewards and never count as revenue
        or as orders.

        Args:
            period (str): 'today', 'week', 'month', 'year' or 'all'.
            start_date (date, optional): Explicit first day, overrides period.
            end_date (date, optional): Explicit last day, overrides period.

        Returns:
            dict: A dictionary containing:
                - period, start, end: The resolved window.
                - total_earnings (float), total_orders (int),
                  total_rewards (int), average_order_value (float)
                - top_customers (list): Top 10 by spend (name, phone,
                  total_spent, order_count).
                - top_items (list): Top 10 by revenue (name, category,
                  total_sold, total_revenue).
                - daily_earnings, monthly_earnings, yearly_earnings (list):
                  Buckets, newest first.
                - transactions (list): Every order in the window, newest first.

        Example:
            Earnings for a given fortnight::

                report = ShopAnalytics.earnings(
                    start_date=date(2026, 10, 1),
                    end_date=date(2026, 10, 14),
                )
        """
        start, end = ShopAnalytics.resolve_window(period, start_date, end_date)

        orders = Order.objects.select_related('customer').order_by('-date')
        if start is not None:
            orders = orders.filter(date__gte=start)
        if end is not None:
            orders = orders.filter(date__lte=end)

        total_earnings = Decimal('0')
        total_orders = 0
        total_rewards = 0
        daily = {}
        monthly = {}
        yearly = {}
        customers = {}
        items = {}
        transactions = []

        for order in orders:
            local_date = timezone.localtime(order.date).date()
            customer = order.customer
            transactions.append({
                'id': str(order.id),
                'customer_name': customer.name,
                'customer_phone': customer.phone,
                'item_name': order.item_name,
                'drink_type': order.drink_type,
                'price': _money(order.price),
                'date': order.date.isoformat(),
                'is_reward': order.is_reward,
            })

            day = daily.setdefault(local_date.isoformat(), {
                'date': local_date.isoformat(),
                'earnings': Decimal('0'),
                'orders': 0,
                'rewards': 0,
            })
            if order.is_reward:
                total_rewards += 1
                day['rewards'] += 1
                continue

            total_orders += 1
            total_earnings += order.price
            day['orders'] += 1
            day['earnings'] += order.price

            month_key = local_date.strftime('%Y-%m')
            month = monthly.setdefault(month_key, {
                'key': month_key,
                'month': local_date.strftime('%B %Y'),
                'earnings': Decimal('0'),
                'orders': 0,
            })
            month['orders'] += 1
            month['earnings'] += order.price

            year = yearly.setdefault(local_date.year, {
                'year': str(local_date.year),
                'earnings': Decimal('0'),
                'orders': 0,
            })
            year['orders'] += 1
            year['earnings'] += order.price

            spender = customers.setdefault(customer.id, {
                'name': customer.name,
                'phone': customer.phone,
                'total_spent': Decimal('0'),
                'order_count': 0,
            })
            spender['order_count'] += 1
            spender['total_spent'] += order.price

            item = items.setdefault((order.item_name, order.drink_type), {
                'name': order.item_name,
                'category': order.drink_type,
                'total_sold': 0,
                'total_revenue': Decimal('0'),
            })
            item['total_sold'] += 1
            item['total_revenue'] += order.price

        def _floats(rows, *fields):
            for row in rows:
                for field in fields:
                    row[field] = _money(row[field])
            return rows

        top_customers = sorted(customers.values(), key=lambda c: c['total_spent'], reverse=True)
        top_items = sorted(items.values(), key=lambda i: i['total_revenue'], reverse=True)

        return {
            'period': period if not (start_date or end_date) else 'custom',
            'start': start.isoformat() if start else None,
            'end': end.isoformat() if end else None,
            'total_earnings': _money(total_earnings),
            'total_orders': total_orders,
            'total_rewards': total_rewards,
            'average_order_value': _money(total_earnings / total_orders) if total_orders else 0.0,
            'top_customers': _floats(top_customers[:TOP_LIMIT], 'total_spent'),
            'top_items': _floats(top_items[:TOP_LIMIT], 'total_revenue'),
            'daily_earnings': _floats(
                [daily[key] for key in sorted(daily, reverse=True)], 'earnings'
            ),
            'monthly_earnings': _floats(
                [monthly[key] for key in sorted(monthly, reverse=True)], 'earnings'
            ),
            'yearly_earnings': _floats(
                [yearly[key] for key in sorted(yearly, reverse=True)], 'earnings'
            ),
            'transactions': transactions,
        }

    @staticmethod
    @degrade_to(list)
    def chart_data(now=None):
        """
        Orders and earnings per day for the dashboard chart.

        Computes the last seven local days and returns the most recent four,
        oldest first. `orders` counts every order of the day, `earnings` only
        paid ones.

        Returns:
            list[dict]: Each with date (label like "Oct 19"), orders, earnings.
        """
        today = timezone.localtime(now or timezone.now()).date()
        days = [today - timedelta(days=offset) for offset in range(CHART_DAYS - 1, -1, -1)]
        buckets = {day: {'orders': 0, 'earnings': Decimal('0')} for day in days}

        orders = Order.objects.filter(
            date__gte=_start_of_day(days[0]),
            date__lte=_end_of_day(today),
        ).only('date', 'price', 'is_reward')

        for order in orders:
            bucket = buckets.get(timezone.localtime(order.date).date())
            if bucket is None:
                continue
            bucket['orders'] += 1
            if not order.is_reward:
                bucket['earnings'] += order.price

        return [
            {
                'date': f"{day:%b} {day.day}",
                'orders': buckets[day]['orders'],
                'earnings': _money(buckets[day]['earnings']),
            }
            for day in days[CHART_DAYS - CHART_VISIBLE_DAYS:]
        ]

    @staticmethod
    @degrade_to(_empty_business_stats)
    def business_stats():
        """
        Lifetime totals shown on the admin profile page.

        Returns:
            dict: total_customers, total_orders, total_revenue (paid orders
            only) and rewards_given.
        """
        customers = Customer.objects.aggregate(
            total_customers=Count('id'),
            total_orders=Sum('total_orders', default=0),
            rewards_given=Sum('rewards_earned', default=0),
        )
        revenue = Order.objects.filter(is_reward=False).aggregate(total=Sum('price'))['total']

        return {
            'total_customers': customers['total_customers'],
            'total_orders': customers['total_orders'],
            'total_revenue': _money(revenue),
            'rewards_given': customers['rewards_given'],
        }

    @staticmethod
    @raise_store_timeout
    def customer_summary(phone):
        """
        Aggregate reward progress of one customer, looked up by phone.

        This is the legacy customer-page figure: it ignores categories and
        subtracts five paid drinks per reward order.

        Returns:
            dict: name, phone, total_drinks, rewards_earned (reward orders),
            upcoming_reward (0 or 1), drinks_to_next_reward, last_order_date.

        Raises:
            CustomerNotFoundError: If no customer has this phone.
            StoreTimeoutError: If the store does not answer.
        """
        customer = get_customer_by_phone(phone=phone)
        counts = customer.orders.aggregate(
            total=Count('id'),
            rewards=Count('id', filter=Q(is_reward=True)),
        )
        last_order = customer.orders.order_by('-sequence').first()

        paid = counts['total'] - counts['rewards']
        effective = paid - counts['rewards'] * REWARD_THRESHOLD

        return {
            'id': str(customer.id),
            'name': customer.name,
            'phone': customer.phone,
            'total_drinks': counts['total'],
            'rewards_earned': counts['rewards'],
            'upcoming_reward': 1 if effective >= REWARD_THRESHOLD else 0,
            'drinks_to_next_reward': max(
                0, REWARD_THRESHOLD - int(math.fmod(effective, REWARD_THRESHOLD))
            ),
            'last_order_date': last_order.date.isoformat() if last_order else None,
        }

    @staticmethod
    @raise_store_timeout
    def category_drinks(customer_id, category):
        """
        One customer's orders in one category with paid/reward counts.

        Raises:
            CustomerNotFoundError: If customer doesn't exist.
        """
        customer = get_customer(customer_id=customer_id)
        orders = list(customer.orders.filter(drink_type=category).order_by('sequence'))
        reward_orders = sum(1 for order in orders if order.is_reward)

        return {
            'customer': {
                'id': str(customer.id),
                'name': customer.name,
                'phone': customer.phone,
            },
            'category': category,
            'orders': [_order_record(order) for order in orders],
            'total_orders': len(orders),
            'paid_orders': len(orders) - reward_orders,
            'reward_orders': reward_orders,
        }
