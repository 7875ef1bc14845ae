"""Human verification (reCAPTCHA) for the admin login."""

import logging
from typing import Optional

import requests
from django.conf import settings

from .exceptions import CaptchaVerificationError

logger = logging.getLogger(__name__)


def verify_captcha(*, token: Optional[str], remote_ip: Optional[str] = None) -> None:
    """
    Verify a reCAPTCHA response token with the provider.

    Verification is skipped when RECAPTCHA_SECRET_KEY is empty, which is the
    local development and test setup.

    Args:
        token: Token produced by the login form widget
        remote_ip: Client address, forwarded to the provider when known

    Raises:
        CaptchaVerificationError: If the token is missing, rejected, or the
            provider cannot be reached
    """
    secret = settings.RECAPTCHA_SECRET_KEY
    if not secret:
        logger.debug("RECAPTCHA_SECRET_KEY not set, skipping captcha verification")
        return

    if not token:
        raise CaptchaVerificationError("reCAPTCHA verification required")

    payload = {'secret': secret, 'response': token}
    if remote_ip:
        payload['remoteip'] = remote_ip

    try:
        response = requests.post(
            settings.RECAPTCHA_VERIFY_URL,
            data=payload,
            timeout=settings.RECAPTCHA_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("reCAPTCHA verification request failed: %s", e)
        raise CaptchaVerificationError("reCAPTCHA verification failed") from e

    if result.get('success') is not True:
        logger.info("reCAPTCHA rejected token: %s", result.get('error-codes', []))
        raise CaptchaVerificationError("reCAPTCHA verification failed")
