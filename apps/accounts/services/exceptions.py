"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class CaptchaVerificationError(AccountsServiceError):
    """Raised when the human-verification token is missing or rejected."""
    pass


class PasswordConfirmationError(AccountsServiceError):
    """Raised when the current password does not match."""
    pass


class AdminAccessRequiredError(AccountsServiceError):
    """Raised when an account has no back-office role."""
    pass
