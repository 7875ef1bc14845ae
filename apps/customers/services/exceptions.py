"""
Domain exceptions for customers services.

Exception Hierarchy:
    CustomersServiceError (base)
    ├── PurchaseValidationError
    ├── NotFoundError
    │   └── CustomerNotFoundError
    ├── InvalidRequestError
    │   └── NoRewardsAvailableError
    └── PersistenceError
"""


class CustomersServiceError(Exception):
    """Base exception for customers services."""
    pass


class PurchaseValidationError(CustomersServiceError):
    """Raised when purchase input is missing or malformed."""
    pass


class NotFoundError(CustomersServiceError):
    """Raised when a referenced record does not exist."""
    pass


class CustomerNotFoundError(NotFoundError):
    """Raised when customer does not exist."""
    pass


class InvalidRequestError(CustomersServiceError):
    """Raised when a well-formed request is not allowed in the current state."""
    pass


class NoRewardsAvailableError(InvalidRequestError):
    """Raised when a reward is redeemed but none is pending for the category."""
    pass


class PersistenceError(CustomersServiceError):
    """Raised when the store rejects or fails a ledger write."""
    pass
