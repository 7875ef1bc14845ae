"""Domain-specific exceptions for menu services."""


class MenuServiceError(Exception):
    """Base exception for menu services."""
    pass


class MenuItemNotFoundError(MenuServiceError):
    """Raised when a menu item does not exist."""
    pass


class InvalidMenuItemError(MenuServiceError):
    """Raised when menu item data is incomplete or invalid."""
    pass


class ImageUploadError(MenuServiceError):
    """Raised when an uploaded image cannot be stored."""
    pass
