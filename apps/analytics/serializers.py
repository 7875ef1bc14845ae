"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    EarningsQuerySerializer - Validates period and date range parameters
    DashboardQuerySerializer - Validates recent-customer pagination
    RewardsQuerySerializer - Validates the optional mobile lookup

Response Serializers:
    DashboardResponseSerializer - Dashboard summary
    RewardsOverviewSerializer - Reward progress of every customer
    CustomerRewardsSerializer - Reward progress of one customer
    EarningsResponseSerializer - Earnings report
    ChartPointSerializer - One day of chart data
    BusinessStatsSerializer - Lifetime totals
    CustomerSummarySerializer - Legacy customer-page summary
    CategoryDrinksSerializer - Orders of one customer in one category
"""

from rest_framework import serializers

from .analytics import EARNINGS_PERIODS


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class EarningsQuerySerializer(serializers.Serializer):
    """
    Validate earnings window query parameters.

    Used by: earnings

    Query Parameters:
        period (str): 'today', 'week', 'month', 'year' or 'all'
        start_date (date): First day of a custom window
        end_date (date): Last day of a custom window

    Note:
        If either date is provided it takes precedence over 'period'.
    """

    period = serializers.ChoiceField(
        choices=EARNINGS_PERIODS,
        default='month',
        help_text="Window: 'today', 'week', 'month', 'year' or 'all'"
    )
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'start_date': 'Start date must be before end date'
            })
        return attrs


class DashboardQuerySerializer(serializers.Serializer):
    """Validate pagination of the dashboard's recent customers."""

    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(
        min_value=1,
        max_value=100,
        required=False,
        help_text='Recent customers per page'
    )


class RewardsQuerySerializer(serializers.Serializer):
    """Optional phone lookup for the rewards endpoint."""

    mobile = serializers.CharField(required=False, allow_blank=True, max_length=20)


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class RecentCustomerSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    phone = serializers.CharField()
    total_orders = serializers.IntegerField()
    drinks_until_reward = serializers.IntegerField()


class DashboardResponseSerializer(serializers.Serializer):
    """Response serializer for dashboard summary."""
    total_customers = serializers.IntegerField()
    total_drinks_sold = serializers.IntegerField()
    rewards_earned = serializers.IntegerField()
    upcoming_rewards = serializers.IntegerField()
    recent_customers = RecentCustomerSerializer(many=True)
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class RewardRecordSerializer(serializers.Serializer):
    """Derived reward state of one category."""
    category = serializers.CharField()
    paid = serializers.IntegerField()
    earned = serializers.IntegerField()
    claimed = serializers.IntegerField()
    pending = serializers.IntegerField()
    progress = serializers.IntegerField()
    drinks_until_reward = serializers.IntegerField()
    status = serializers.ChoiceField(choices=['progress', 'upcoming', 'ready'])


class OrderRecordSerializer(serializers.Serializer):
    id = serializers.CharField()
    sequence = serializers.IntegerField()
    drink_type = serializers.CharField()
    item_name = serializers.CharField()
    item_id = serializers.CharField(allow_null=True)
    price = serializers.FloatField()
    date = serializers.DateTimeField()
    is_reward = serializers.BooleanField()
    claimed = serializers.BooleanField()


class CustomerRewardsSerializer(serializers.Serializer):
    """Reward progress of one customer."""
    id = serializers.CharField()
    name = serializers.CharField()
    phone = serializers.CharField()
    total_orders = serializers.IntegerField()
    total_paid_drinks = serializers.IntegerField()
    total_rewards_earned = serializers.IntegerField()
    rewards = RewardRecordSerializer(many=True)
    orders = OrderRecordSerializer(many=True, required=False)


class RewardsStatsSerializer(serializers.Serializer):
    total_rewards_given = serializers.IntegerField()
    customers_with_rewards = serializers.IntegerField()
    ready_rewards = serializers.IntegerField()
    upcoming_rewards = serializers.IntegerField()


class RewardsOverviewSerializer(serializers.Serializer):
    """Response serializer for the rewards listing."""
    customers = CustomerRewardsSerializer(many=True)
    stats = RewardsStatsSerializer()


class TopCustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField()
    total_spent = serializers.FloatField()
    order_count = serializers.IntegerField()


class TopItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    category = serializers.CharField()
    total_sold = serializers.IntegerField()
    total_revenue = serializers.FloatField()


class DailyEarningsSerializer(serializers.Serializer):
    date = serializers.DateField()
    earnings = serializers.FloatField()
    orders = serializers.IntegerField()
    rewards = serializers.IntegerField()


class MonthlyEarningsSerializer(serializers.Serializer):
    key = serializers.CharField(help_text='YYYY-MM')
    month = serializers.CharField(help_text='e.g. "October 2026"')
    earnings = serializers.FloatField()
    orders = serializers.IntegerField()


class YearlyEarningsSerializer(serializers.Serializer):
    year = serializers.CharField()
    earnings = serializers.FloatField()
    orders = serializers.IntegerField()


class TransactionSerializer(serializers.Serializer):
    id = serializers.CharField()
    customer_name = serializers.CharField()
    customer_phone = serializers.CharField()
    item_name = serializers.CharField()
    drink_type = serializers.CharField()
    price = serializers.FloatField()
    date = serializers.DateTimeField()
    is_reward = serializers.BooleanField()


class EarningsResponseSerializer(serializers.Serializer):
    """Response serializer for the earnings report."""
    period = serializers.CharField(allow_null=True)
    start = serializers.DateTimeField(allow_null=True)
    end = serializers.DateTimeField(allow_null=True)
    total_earnings = serializers.FloatField()
    total_orders = serializers.IntegerField()
    total_rewards = serializers.IntegerField()
    average_order_value = serializers.FloatField()
    top_customers = TopCustomerSerializer(many=True)
    top_items = TopItemSerializer(many=True)
    daily_earnings = DailyEarningsSerializer(many=True)
    monthly_earnings = MonthlyEarningsSerializer(many=True)
    yearly_earnings = YearlyEarningsSerializer(many=True)
    transactions = TransactionSerializer(many=True)


class ChartPointSerializer(serializers.Serializer):
    """One day of dashboard chart data."""
    date = serializers.CharField(help_text='Label like "Oct 19"')
    orders = serializers.IntegerField()
    earnings = serializers.FloatField()


class BusinessStatsSerializer(serializers.Serializer):
    """Lifetime totals for the admin profile page."""
    total_customers = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    total_revenue = serializers.FloatField()
    rewards_given = serializers.IntegerField()


class CustomerSummarySerializer(serializers.Serializer):
    """Legacy customer-page summary."""
    id = serializers.CharField()
    name = serializers.CharField()
    phone = serializers.CharField()
    total_drinks = serializers.IntegerField()
    rewards_earned = serializers.IntegerField()
    upcoming_reward = serializers.IntegerField()
    drinks_to_next_reward = serializers.IntegerField()
    last_order_date = serializers.DateTimeField(allow_null=True)


class CategoryCustomerSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    phone = serializers.CharField()


class CategoryDrinksSerializer(serializers.Serializer):
    """Orders of one customer in one category."""
    customer = CategoryCustomerSerializer()
    category = serializers.CharField()
    orders = OrderRecordSerializer(many=True)
    total_orders = serializers.IntegerField()
    paid_orders = serializers.IntegerField()
    reward_orders = serializers.IntegerField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
