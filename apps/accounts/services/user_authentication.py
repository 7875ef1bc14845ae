"""Admin authentication service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError, AdminAccessRequiredError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_admin(*, email: str, password: str) -> User:
    """
    Authenticate a shop admin with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: Admin's email (case-insensitive)
        password: Admin's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
        AdminAccessRequiredError: If the account has no admin role
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=email.strip().lower())
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid credentials")

    if not user.check_password(password):
        logger.info("Failed login attempt for %s", user.email)
        raise InvalidCredentialsError("Invalid credentials")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    if not user.is_shop_admin:
        logger.info("Login refused for %s: no back-office role", user.email)
        raise AdminAccessRequiredError("Admin access required")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("Admin %s logged in", user.email)
    return user
