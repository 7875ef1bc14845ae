"""Services for customers business logic."""

from .exceptions import (
    CustomersServiceError,
    PurchaseValidationError,
    NotFoundError,
    CustomerNotFoundError,
    InvalidRequestError,
    NoRewardsAvailableError,
    PersistenceError,
)
from .reward_ledger import record_purchase, claim_reward
from .lookup import get_customer, get_customer_by_phone, list_customers
from .maintenance import (
    counters_from_orders,
    rebuild_customer_rewards,
    rebuild_rewards,
    rename_category,
)

__all__ = [
    # Exceptions
    'CustomersServiceError',
    'PurchaseValidationError',
    'NotFoundError',
    'CustomerNotFoundError',
    'InvalidRequestError',
    'NoRewardsAvailableError',
    'PersistenceError',
    # Ledger
    'record_purchase',
    'claim_reward',
    # Lookup
    'get_customer',
    'get_customer_by_phone',
    'list_customers',
    # Maintenance
    'counters_from_orders',
    'rebuild_customer_rewards',
    'rebuild_rewards',
    'rename_category',
]
