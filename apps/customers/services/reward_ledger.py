"""
Reward ledger service - the only writer of orders and reward counters.

Every write for a customer happens while holding that customer's in-process
lock and, inside the transaction, a row lock on the Customer. Counters,
orders and the customer's denormalized totals are committed together.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, DatabaseError, IntegrityError
from django.utils import timezone

from apps.customers.locks import customer_lock
from apps.customers.models import Customer, Order
from apps.customers.rewards import earned_for
from apps.menu.models import MenuItem
from apps.menu.services import get_menu_item
from .exceptions import (
    PurchaseValidationError,
    CustomerNotFoundError,
    NoRewardsAvailableError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


def _clean_price(price) -> Decimal:
    try:
        value = Decimal(str(price))
    except (InvalidOperation, TypeError, ValueError):
        raise PurchaseValidationError("Price must be a positive number")
    if not value.is_finite() or value <= 0:
        raise PurchaseValidationError("Price must be a positive number")
    return value


def _find_or_create_customer(*, name: str, phone: str) -> Customer:
    """Locked Customer row for a phone, created on first purchase."""
    try:
        customer, created = Customer.objects.get_or_create(
            phone=phone,
            defaults={'name': name}
        )
    except IntegrityError:
        # Another process created this phone between get and create
        customer = Customer.objects.get(phone=phone)
        created = False

    if created:
        logger.info("Created customer %s for phone %s", customer.id, phone)

    return Customer.objects.select_for_update().get(pk=customer.pk)


def _append_order(
    customer: Customer,
    *,
    category: str,
    item_name: str,
    item: Optional[MenuItem],
    price: Decimal,
    is_reward: bool,
) -> Order:
    return Order.objects.create(
        customer=customer,
        sequence=customer.next_order_sequence(),
        drink_type=category,
        item_name=item_name,
        item=item,
        price=price,
        date=timezone.now(),
        is_reward=is_reward,
        claimed=True,
    )


def _save_customer(customer: Customer) -> None:
    customer.total_orders = customer.orders.count()
    customer.save(update_fields=['total_orders', 'rewards_earned', 'updated_at'])


@transaction.atomic
def _apply_purchase(
    *,
    customer_name: str,
    customer_phone: str,
    category: str,
    item_id,
    item_name: str,
    price: Decimal,
    is_reward: bool,
) -> Customer:
    item = None if is_reward else get_menu_item(item_id=item_id)

    customer = _find_or_create_customer(name=customer_name, phone=customer_phone)
    counter = customer.get_reward_counter(category)

    _append_order(
        customer,
        category=category,
        item_name=item_name,
        item=item,
        price=price,
        is_reward=is_reward,
    )

    if is_reward:
        counter.claimed += 1
        customer.rewards_earned += 1
    else:
        counter.paid += 1
        counter.earned = earned_for(counter.paid)
    counter.save()

    _save_customer(customer)
    return customer


def record_purchase(
    *,
    customer_name: str,
    customer_phone: str,
    category: str,
    item_id: Optional[UUID] = None,
    item_name: str = '',
    price=None,
    is_reward: bool = False,
) -> tuple[Customer, bool]:
    """
    Record a drink sale (or a free reward drink) for a customer.

    The customer is found by phone and created on first purchase. A paid
    drink bumps the category's paid count and recomputes earned rewards;
    a reward drink is recorded free and counted as claimed in the category.

    Args:
        customer_name: Name used when the customer is created
        customer_phone: Phone number, the customer's identity
        category: Drink category the order counts towards
        item_id: Menu item sold (required for paid drinks, ignored for rewards)
        item_name: Item name as shown on the order
        price: Positive price (ignored for rewards, stored as 0)
        is_reward: Whether this is a free reward drink

    Returns:
        Tuple of (Customer, is_reward)

    Raises:
        PurchaseValidationError: If required fields are missing or price invalid
        MenuItemNotFoundError: If a paid drink references no existing menu item
        PersistenceError: If the store fails to save the purchase
    """
    customer_name = (customer_name or '').strip()
    customer_phone = (customer_phone or '').strip()
    category = (category or '').strip()
    item_name = (item_name or '').strip()
    is_reward = bool(is_reward)

    if not customer_name or not customer_phone or not category:
        raise PurchaseValidationError("All fields are required")

    if is_reward:
        item_id = None
        price = Decimal('0.00')
        item_name = item_name or f"{category} (Reward)"
    else:
        if not item_name or price is None:
            raise PurchaseValidationError("All fields are required")
        price = _clean_price(price)

    with customer_lock(customer_phone):
        try:
            customer = _apply_purchase(
                customer_name=customer_name,
                customer_phone=customer_phone,
                category=category,
                item_id=item_id,
                item_name=item_name,
                price=price,
                is_reward=is_reward,
            )
        except DatabaseError as e:
            logger.exception("Failed to record purchase for %s", customer_phone)
            raise PersistenceError("Failed to process purchase") from e

    logger.info(
        "Recorded %s order for %s in %s",
        'reward' if is_reward else 'paid', customer_phone, category
    )
    return customer, is_reward


@transaction.atomic
def _apply_claim(*, customer_id: UUID, category: str) -> Customer:
    try:
        customer = Customer.objects.select_for_update().get(pk=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError("Customer not found")

    counter = customer.get_reward_counter(category)
    if counter.earned <= counter.claimed:
        logger.info(
            "Rejected claim for customer %s in %s: nothing pending",
            customer_id, category
        )
        raise NoRewardsAvailableError("No rewards available to claim")

    _append_order(
        customer,
        category=category,
        item_name=f"{category} (Reward)",
        item=None,
        price=Decimal('0.00'),
        is_reward=True,
    )

    counter.claimed += 1
    counter.save()

    customer.rewards_earned += 1
    _save_customer(customer)
    return customer


def claim_reward(*, customer_id: UUID, category: str) -> tuple[Customer, str]:
    """
    Redeem one pending reward in a category.

    Creates a free reward order named "<category> (Reward)" and moves one
    reward from pending to claimed. The availability check and the update
    run under the same row lock, so concurrent claims cannot overdraw.

    Args:
        customer_id: UUID of the customer
        category: Category the reward was earned in

    Returns:
        Tuple of (Customer, category)

    Raises:
        PurchaseValidationError: If category is empty
        CustomerNotFoundError: If customer doesn't exist
        NoRewardsAvailableError: If no reward is pending (nothing is changed)
        PersistenceError: If the store fails to save the claim
    """
    category = (category or '').strip()
    if not category:
        raise PurchaseValidationError("Category is required")

    try:
        phone = Customer.objects.values_list('phone', flat=True).get(pk=customer_id)
    except (Customer.DoesNotExist, ValidationError, ValueError):
        raise CustomerNotFoundError("Customer not found")

    with customer_lock(phone):
        try:
            customer = _apply_claim(customer_id=customer_id, category=category)
        except DatabaseError as e:
            logger.exception("Failed to claim %s reward for customer %s", category, customer_id)
            raise PersistenceError("Failed to claim reward") from e

    logger.info("Customer %s claimed a %s reward", customer_id, category)
    return customer, category
