"""Services for menu business logic."""

from .exceptions import (
    MenuServiceError,
    MenuItemNotFoundError,
    InvalidMenuItemError,
    ImageUploadError,
)
from .catalog import (
    get_menu_item,
    create_menu_item,
    update_menu_item,
    set_menu_item_availability,
    delete_menu_item,
    list_menu_items,
    list_categories,
    get_top_sellers,
)
from .images import store_menu_image

__all__ = [
    # Exceptions
    'MenuServiceError',
    'MenuItemNotFoundError',
    'InvalidMenuItemError',
    'ImageUploadError',
    # Services
    'get_menu_item',
    'create_menu_item',
    'update_menu_item',
    'set_menu_item_availability',
    'delete_menu_item',
    'list_menu_items',
    'list_categories',
    'get_top_sellers',
    'store_menu_image',
]
