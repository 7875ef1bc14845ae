from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsShopAdmin
from apps.analytics.analytics import ShopAnalytics
from apps.analytics.exceptions import StoreTimeoutError
from apps.analytics.serializers import (
    CustomerSummarySerializer,
    CategoryDrinksSerializer,
    ErrorSerializer,
)
from apps.menu.services import MenuItemNotFoundError
from .serializers import (
    CustomerSerializer,
    PurchaseSerializer,
    ClaimRewardSerializer,
    CustomerQuerySerializer,
    PurchaseResponseSerializer,
    ClaimRewardResponseSerializer,
)
from .services import (
    record_purchase,
    claim_reward as claim_customer_reward,
    list_customers,
    PurchaseValidationError,
    CustomerNotFoundError,
    NoRewardsAvailableError,
    PersistenceError,
)


@extend_schema(
    request=PurchaseSerializer,
    responses={
        201: PurchaseResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
        503: ErrorSerializer,
    },
    description=(
        "Record a drink sale for a customer (created on first purchase by phone). "
        "Paid drinks count towards the category's reward; with is_reward=true a "
        "free reward drink is recorded as claimed instead."
    ),
    tags=['customers'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def purchase(request):
    """Point-of-sale checkout - thin HTTP handler."""
    serializer = PurchaseSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        customer, is_reward = record_purchase(
            customer_name=data['customer_name'],
            customer_phone=data['customer_phone'],
            category=data['drink_type'],
            item_id=data.get('item_id'),
            item_name=data.get('item_name', ''),
            price=data.get('price'),
            is_reward=data['is_reward'],
        )
    except PurchaseValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except MenuItemNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except PersistenceError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'message': 'Free reward drink recorded!' if is_reward else 'Purchase recorded successfully',
        'customer': CustomerSerializer(customer).data,
        'is_reward': is_reward,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[
        OpenApiParameter('phone', OpenApiTypes.STR, description="Look up one customer's summary (public)"),
    ],
    responses={
        200: CustomerSerializer(many=True),
        403: ErrorSerializer,
        404: ErrorSerializer,
        503: ErrorSerializer,
    },
    description=(
        "Without ?phone= lists every customer, most recently active first (admin). "
        "With ?phone= returns that customer's reward summary (public)."
    ),
    tags=['customers'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def customer_list(request):
    """List customers, or look one up by phone."""
    query_serializer = CustomerQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    phone = query_serializer.validated_data.get('phone', '').strip()

    if phone:
        try:
            summary = ShopAnalytics.customer_summary(phone)
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except StoreTimeoutError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(CustomerSummarySerializer(summary).data)

    permission = IsShopAdmin()
    if not permission.has_permission(request, None):
        return Response({'error': permission.message}, status=status.HTTP_403_FORBIDDEN)

    return Response(CustomerSerializer(list_customers(), many=True).data)


@extend_schema(
    request=ClaimRewardSerializer,
    responses={
        200: ClaimRewardResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="Redeem one pending reward of a category as a free drink.",
    tags=['customers'],
)
@api_view(['POST'])
@permission_classes([IsShopAdmin])
def claim_reward(request, customer_id):
    """Claim a reward - thin HTTP handler."""
    serializer = ClaimRewardSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        customer, category = claim_customer_reward(
            customer_id=customer_id,
            category=serializer.validated_data['category']
        )
    except PurchaseValidationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except CustomerNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NoRewardsAvailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PersistenceError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'message': 'Reward claimed successfully',
        'customer': CustomerSerializer(customer).data,
        'claimed_category': category,
    })


@extend_schema(
    responses={
        200: CategoryDrinksSerializer,
        404: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="A customer's orders in one drink category with paid and reward counts.",
    tags=['customers'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def category_drinks(request, customer_id, category):
    """Orders of one customer in one category."""
    try:
        data = ShopAnalytics.category_drinks(customer_id, category)
    except CustomerNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except StoreTimeoutError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(data)
