from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from apps.analytics.analytics import ShopAnalytics
from apps.analytics.serializers import BusinessStatsSerializer
from .permissions import IsShopAdmin
from .serializers import (
    UserSerializer,
    LoginSerializer,
    ChangePasswordSerializer,
    ShopSerializer,
)
from .services import (
    authenticate_admin,
    verify_captcha,
    change_password as change_admin_password,
    get_or_create_shop,
    update_shop,
    InvalidCredentialsError,
    InactiveAccountError,
    CaptchaVerificationError,
    PasswordConfirmationError,
    AdminAccessRequiredError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Refresh token being discarded")


class ProfileResponseSerializer(serializers.Serializer):
    admin = UserSerializer()
    shop = ShopSerializer()
    stats = BusinessStatsSerializer()


def _client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


@extend_schema(
    request=LoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate a shop admin (email, password, reCAPTCHA token) and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email, password and captcha token."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        verify_captcha(token=data.get('captcha_token'), remote_ip=_client_ip(request))
    except CaptchaVerificationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_admin(email=data['email'], password=data['password'])
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except (InactiveAccountError, AdminAccessRequiredError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. Tokens are stateless; the client discards them.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsShopAdmin])
def logout(request):
    """Logout, validating the refresh token when one is sent."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({'error': 'Invalid token'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Logout successful'})


@extend_schema(
    methods=['GET'],
    responses={200: ProfileResponseSerializer},
    description="Admin account, shop profile and business statistics.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current admin's username or email.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsShopAdmin])
def profile(request):
    """Get the admin profile page data, or update the admin account."""
    if request.method == 'PATCH':
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    return Response({
        'admin': UserSerializer(request.user).data,
        'shop': ShopSerializer(get_or_create_shop()).data,
        'stats': ShopAnalytics.business_stats(),
    })


@extend_schema(
    methods=['GET'],
    responses={200: ShopSerializer},
    description="Get the shop profile.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=ShopSerializer,
    responses={
        200: ShopSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the shop profile (name, contact details, license).",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsShopAdmin])
def shop(request):
    """Get or update the shop profile."""
    if request.method == 'PATCH':
        serializer = ShopSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = update_shop(**serializer.validated_data)
        return Response(ShopSerializer(updated).data)

    return Response(ShopSerializer(get_or_create_shop()).data)


@extend_schema(
    request=ChangePasswordSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Change the current admin's password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsShopAdmin])
def change_password(request):
    """Change password after confirming the current one."""
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_admin_password(
            user_id=request.user.id,
            current_password=serializer.validated_data['current_password'],
            new_password=serializer.validated_data['new_password'],
        )
    except PasswordConfirmationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Password changed successfully'})
