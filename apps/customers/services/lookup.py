"""Customer lookup service - read-only access for views and reporters."""

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from apps.customers.models import Customer
from .exceptions import CustomerNotFoundError


def get_customer(*, customer_id: UUID) -> Customer:
    """
    Get a customer by ID.

    Raises:
        CustomerNotFoundError: If customer doesn't exist
    """
    try:
        return Customer.objects.get(pk=customer_id)
    except (Customer.DoesNotExist, ValidationError, ValueError):
        raise CustomerNotFoundError("Customer not found")


def get_customer_by_phone(*, phone: str) -> Customer:
    """
    Get a customer by phone number.

    Raises:
        CustomerNotFoundError: If no customer has this phone
    """
    try:
        return Customer.objects.get(phone=(phone or '').strip())
    except Customer.DoesNotExist:
        raise CustomerNotFoundError("Customer not found")


def list_customers() -> QuerySet:
    """All customers, most recently active first, with orders and counters prefetched."""
    return (
        Customer.objects
        .order_by('-updated_at')
        .prefetch_related('orders__item', 'reward_counters')
    )
