"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    CaptchaVerificationError,
    PasswordConfirmationError,
    AdminAccessRequiredError,
)
from .captcha import verify_captcha
from .user_authentication import authenticate_admin
from .account_management import change_password
from .shop_profile import get_or_create_shop, update_shop

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'CaptchaVerificationError',
    'PasswordConfirmationError',
    'AdminAccessRequiredError',
    # Services
    'verify_captcha',
    'authenticate_admin',
    'change_password',
    'get_or_create_shop',
    'update_shop',
]
