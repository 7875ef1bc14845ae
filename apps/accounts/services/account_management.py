"""Account management service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from uuid import UUID

from .exceptions import PasswordConfirmationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def change_password(*, user_id: UUID, current_password: str, new_password: str) -> None:
    """
    Replace an admin's password after confirming the current one.

    Args:
        user_id: Admin's ID
        current_password: Password the admin logs in with today
        new_password: Already-validated replacement

    Raises:
        PasswordConfirmationError: If current password is incorrect
    """
    user = (
        User.objects
        .select_for_update()
        .get(id=user_id)
    )

    if not user.check_password(current_password):
        raise PasswordConfirmationError("Current password is incorrect")

    user.set_password(new_password)
    user.save(update_fields=['password'])

    logger.info("Password changed for %s", user.email)
