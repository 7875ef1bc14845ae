"""Menu image storage - uploads go through Django's default storage."""

import logging
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

from .exceptions import ImageUploadError

logger = logging.getLogger(__name__)


def store_menu_image(upload) -> str:
    """
    Save an uploaded image and return the URL it is served from.

    Args:
        upload: UploadedFile from request.FILES

    Returns:
        Public URL of the stored file

    Raises:
        ImageUploadError: If the file is not an image or storage fails
    """
    content_type = getattr(upload, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        raise ImageUploadError("Uploaded file must be an image")

    # Prefix keeps repeated uploads of "mojito.png" from colliding
    filename = f"{settings.MENU_IMAGE_FOLDER}/{uuid.uuid4().hex[:8]}_{upload.name}"

    try:
        path = default_storage.save(filename, upload)
    except OSError as e:
        logger.exception("Failed to store menu image %s", upload.name)
        raise ImageUploadError("Failed to upload image") from e

    logger.info("Stored menu image at %s", path)
    return default_storage.url(path)


def resolve_menu_image(*, upload=None, image_url: str = '') -> str:
    """Pick the image for a new item: upload, explicit URL, or placeholder."""
    if upload is not None:
        return store_menu_image(upload)
    return image_url or settings.MENU_PLACEHOLDER_IMAGE
