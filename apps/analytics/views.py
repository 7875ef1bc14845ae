from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsShopAdmin
from apps.customers.services import CustomerNotFoundError
from .analytics import ShopAnalytics
from .serializers import (
    # Input serializers
    EarningsQuerySerializer,
    DashboardQuerySerializer,
    RewardsQuerySerializer,
    # Response serializers
    DashboardResponseSerializer,
    RewardsOverviewSerializer,
    EarningsResponseSerializer,
    ChartPointSerializer,
    ErrorSerializer,
)
from .exceptions import InvalidPeriodError, StoreTimeoutError


@extend_schema(
    parameters=[
        OpenApiParameter('page', OpenApiTypes.INT, description='Page of recent customers', default=1),
        OpenApiParameter('page_size', OpenApiTypes.INT, description='Recent customers per page'),
    ],
    responses={
        200: DashboardResponseSerializer,
        403: ErrorSerializer,
    },
    description="Dashboard summary: customer, drink and reward counts plus recently active customers.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsShopAdmin])
def dashboard(request):
    """Dashboard summary - thin HTTP handler."""
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    data = ShopAnalytics.dashboard_summary(
        page=params['page'],
        page_size=params.get('page_size')
    )

    return Response(data)


@extend_schema(
    parameters=[
        OpenApiParameter('period', OpenApiTypes.STR, description="Window: 'today', 'week', 'month', 'year', 'all'", default='month'),
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
    ],
    responses={
        200: EarningsResponseSerializer,
        400: ErrorSerializer,
    },
    description="Earnings over a time window, broken down by day, month and year.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsShopAdmin])
def earnings(request):
    """Earnings report - thin HTTP handler."""
    query_serializer = EarningsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ShopAnalytics.earnings(
            period=params['period'],
            start_date=params.get('start_date'),
            end_date=params.get('end_date')
        )
    except InvalidPeriodError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(data)


@extend_schema(
    responses={200: ChartPointSerializer(many=True)},
    description="Orders and earnings for each of the last four days.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsShopAdmin])
def chart_data(request):
    """Chart data for the admin dashboard - thin HTTP handler."""
    return Response(ShopAnalytics.chart_data())


@extend_schema(
    parameters=[
        OpenApiParameter('mobile', OpenApiTypes.STR, description="Customer's phone number; omit to list every customer (admin only)"),
    ],
    responses={
        200: RewardsOverviewSerializer,
        403: ErrorSerializer,
        404: ErrorSerializer,
        503: ErrorSerializer,
    },
    description=(
        "Loyalty rewards. With ?mobile= returns one customer's per-category progress "
        "and orders (public); without it lists every customer with reward stats (admin)."
    ),
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def rewards(request):
    """Reward lookup by phone, or the admin rewards listing."""
    query_serializer = RewardsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    mobile = query_serializer.validated_data.get('mobile', '').strip()

    if mobile:
        try:
            data = ShopAnalytics.customer_rewards(mobile)
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except StoreTimeoutError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(data)

    permission = IsShopAdmin()
    if not permission.has_permission(request, None):
        return Response({'error': permission.message}, status=status.HTTP_403_FORBIDDEN)

    return Response(ShopAnalytics.rewards_overview())
