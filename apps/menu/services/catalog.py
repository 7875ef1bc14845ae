"""Menu catalog service - CRUD, availability and listings for menu items."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, QuerySet

from apps.menu.models import MenuItem
from .exceptions import MenuItemNotFoundError, InvalidMenuItemError
from .images import resolve_menu_image, store_menu_image

logger = logging.getLogger(__name__)

TOP_SELLERS_LIMIT = 6


def _clean_price(price) -> Decimal:
    """Coerce price to a positive Decimal or raise InvalidMenuItemError."""
    try:
        value = Decimal(str(price))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidMenuItemError("Price must be a positive number")
    if not value.is_finite() or value <= 0:
        raise InvalidMenuItemError("Price must be a positive number")
    return value


def get_menu_item(*, item_id: UUID, active_only: bool = False) -> MenuItem:
    """
    Get a menu item by ID.

    Args:
        item_id: UUID of the item
        active_only: Treat inactive items as missing

    Returns:
        MenuItem instance

    Raises:
        MenuItemNotFoundError: If item doesn't exist (or is inactive with active_only)
    """
    queryset = MenuItem.objects.all()
    if active_only:
        queryset = queryset.filter(is_active=True)

    try:
        return queryset.get(id=item_id)
    except (MenuItem.DoesNotExist, ValidationError, ValueError):
        raise MenuItemNotFoundError("Menu item not found")


@transaction.atomic
def create_menu_item(
    *,
    name: str,
    category: str,
    price,
    description: str = '',
    image=None,
    image_url: str = '',
    is_active: bool = True,
) -> MenuItem:
    """
    Create a new menu item.

    Args:
        name: Display name
        category: Drink category (open set, e.g. "Mojito", "Juice")
        price: Positive price
        description: Optional description
        image: Optional uploaded image file
        image_url: Optional already-hosted image URL
        is_active: Whether the item is orderable

    Returns:
        Created MenuItem

    Raises:
        InvalidMenuItemError: If name/category missing or price not positive
        ImageUploadError: If the upload cannot be stored
    """
    name = (name or '').strip()
    category = (category or '').strip()
    if not name or not category:
        raise InvalidMenuItemError("Name, category, and price are required")

    item = MenuItem.objects.create(
        name=name,
        category=category,
        price=_clean_price(price),
        description=description or '',
        image=resolve_menu_image(upload=image, image_url=image_url),
        is_active=is_active,
    )

    logger.info("Created menu item %s in category %s", item.name, item.category)
    return item


@transaction.atomic
def update_menu_item(
    *,
    item_id: UUID,
    name: Optional[str] = None,
    category: Optional[str] = None,
    price=None,
    description: Optional[str] = None,
    image=None,
    image_url: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> MenuItem:
    """
    Update a menu item. Fields left as None keep their current value.

    The stored image is only replaced when a new upload or URL is given.

    Raises:
        MenuItemNotFoundError: If item doesn't exist
        InvalidMenuItemError: If a provided value is invalid
    """
    try:
        item = MenuItem.objects.select_for_update().get(id=item_id)
    except (MenuItem.DoesNotExist, ValidationError, ValueError):
        raise MenuItemNotFoundError("Menu item not found")

    if name is not None:
        if not name.strip():
            raise InvalidMenuItemError("Name cannot be empty")
        item.name = name.strip()

    if category is not None:
        if not category.strip():
            raise InvalidMenuItemError("Category cannot be empty")
        item.category = category.strip()

    if price is not None:
        item.price = _clean_price(price)

    if description is not None:
        item.description = description

    if is_active is not None:
        item.is_active = is_active

    if image is not None:
        item.image = store_menu_image(image)
    elif image_url:
        item.image = image_url

    item.save()

    logger.info("Updated menu item %s", item.id)
    return item


@transaction.atomic
def set_menu_item_availability(*, item_id: UUID, is_active) -> MenuItem:
    """
    Mark a menu item as available or unavailable.

    Raises:
        InvalidMenuItemError: If is_active is not a boolean
        MenuItemNotFoundError: If item doesn't exist
    """
    if not isinstance(is_active, bool):
        raise InvalidMenuItemError("is_active must be a boolean")

    try:
        item = MenuItem.objects.select_for_update().get(id=item_id)
    except (MenuItem.DoesNotExist, ValidationError, ValueError):
        raise MenuItemNotFoundError("Menu item not found")

    item.is_active = is_active
    item.save(update_fields=['is_active', 'updated_at'])

    logger.info(
        "Menu item %s is now %s", item.id, 'active' if is_active else 'inactive'
    )
    return item


@transaction.atomic
def delete_menu_item(*, item_id: UUID) -> None:
    """
    Permanently delete a menu item.

    Past orders keep their denormalized item name; their item link is cleared.

    Raises:
        MenuItemNotFoundError: If item doesn't exist
    """
    item = get_menu_item(item_id=item_id)
    item.delete()
    logger.info("Deleted menu item %s", item_id)


def list_menu_items(
    *,
    include_inactive: bool = False,
    category: Optional[str] = None,
) -> QuerySet:
    """Menu items sorted by category, then name."""
    queryset = MenuItem.objects.all()
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    if category:
        queryset = queryset.filter(category=category)
    return queryset.order_by('category', 'name')


def list_categories(*, include_inactive: bool = False) -> list[str]:
    """Distinct categories present on the menu, alphabetically."""
    queryset = list_menu_items(include_inactive=include_inactive)
    return list(
        queryset
        .order_by('category')
        .values_list('category', flat=True)
        .distinct()
    )


def get_top_sellers(*, limit: int = TOP_SELLERS_LIMIT) -> QuerySet:
    """
    Active menu items ranked by number of paid orders.

    Reward redemptions are not sales and are excluded from the count.
    Items never sold still appear (sold=0) so the list fills up on a new shop.
    """
    return (
        MenuItem.objects
        .filter(is_active=True)
        .annotate(sold=Count('orders', filter=Q(orders__is_reward=False)))
        .order_by('-sold', 'name')[:limit]
    )
