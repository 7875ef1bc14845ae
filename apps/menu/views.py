from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser, FormParser, MultiPartParser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsShopAdminOrReadOnly
from .serializers import (
    MenuItemSerializer,
    MenuItemWriteSerializer,
    MenuItemToggleSerializer,
    TopSellerSerializer,
)
from .services import (
    get_menu_item,
    create_menu_item,
    update_menu_item,
    set_menu_item_availability,
    delete_menu_item,
    list_menu_items,
    list_categories,
    get_top_sellers,
    MenuItemNotFoundError,
    InvalidMenuItemError,
    ImageUploadError,
)


def _is_admin(request):
    return bool(getattr(request.user, 'is_shop_admin', False))


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter('category', OpenApiTypes.STR, description='Only items of this category'),
        ],
        description="Menu items by category and name. Admins also see unavailable items.",
        tags=['menu'],
    ),
    retrieve=extend_schema(tags=['menu']),
    create=extend_schema(request=MenuItemWriteSerializer, tags=['menu']),
    update=extend_schema(request=MenuItemWriteSerializer, tags=['menu']),
    partial_update=extend_schema(request=MenuItemWriteSerializer, tags=['menu']),
    destroy=extend_schema(tags=['menu']),
)
class MenuItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for MenuItem CRUD operations.

    list: Get the menu (active items; admins see all)
    create: Create a menu item, optionally uploading its image
    retrieve: Get a specific menu item
    update: Update a menu item
    partial_update: Partially update a menu item
    destroy: Permanently delete a menu item
    """

    serializer_class = MenuItemSerializer
    permission_classes = [IsShopAdminOrReadOnly]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_queryset(self):
        """
        Filter menu items based on query parameters.

        Filters:
        - category: Exact category name
        """
        return list_menu_items(
            include_inactive=_is_admin(self.request),
            category=self.request.query_params.get('category'),
        )

    def retrieve(self, request, *args, **kwargs):
        """Get one menu item; unavailable items are hidden from the public."""
        try:
            item = get_menu_item(item_id=kwargs.get('pk'), active_only=not _is_admin(request))
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(MenuItemSerializer(item).data)

    def create(self, request, *args, **kwargs):
        """Create a new menu item."""
        serializer = MenuItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = create_menu_item(**serializer.validated_data)
        except InvalidMenuItemError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ImageUploadError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(MenuItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update a menu item (PUT replaces, PATCH merges)."""
        partial = kwargs.pop('partial', False)
        serializer = MenuItemWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            item = update_menu_item(item_id=kwargs.get('pk'), **serializer.validated_data)
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InvalidMenuItemError, ImageUploadError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(MenuItemSerializer(item).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a menu item. Past orders keep the item's name."""
        try:
            delete_menu_item(item_id=kwargs.get('pk'))
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=MenuItemToggleSerializer,
        responses={200: MenuItemSerializer},
        description="Mark a menu item as available or unavailable.",
        tags=['menu'],
    )
    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        """Set a menu item's availability."""
        serializer = MenuItemToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = set_menu_item_availability(
                item_id=pk,
                is_active=serializer.validated_data['is_active']
            )
        except MenuItemNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(MenuItemSerializer(item).data)

    @extend_schema(
        responses={200: OpenApiTypes.STR},
        description="Distinct categories on the menu.",
        tags=['menu'],
    )
    @action(detail=False, methods=['get'])
    def categories(self, request):
        """Get list of all menu categories."""
        return Response(list_categories(include_inactive=_is_admin(request)))

    @extend_schema(
        responses={200: TopSellerSerializer(many=True)},
        description="Best-selling available items by number of paid orders.",
        tags=['menu'],
    )
    @action(detail=False, methods=['get'], url_path='top-sellers')
    def top_sellers(self, request):
        """Get the best-selling menu items."""
        return Response(TopSellerSerializer(get_top_sellers(), many=True).data)
