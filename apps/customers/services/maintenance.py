"""
Maintenance services - repair and restructure reward bookkeeping.

Used by the rebuild_rewards and rename_category management commands.
"""

import logging
from collections import OrderedDict

from django.db import transaction, DatabaseError

from apps.customers.locks import customer_lock
from apps.customers.models import Customer, Order, RewardCounter
from apps.customers.rewards import earned_for
from apps.menu.models import MenuItem
from .exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


def counters_from_orders(orders) -> "OrderedDict[str, dict]":
    """
    Replay an order history into per-category counters.

    Paid orders bump paid and recompute earned; reward orders bump claimed.

    Args:
        orders: Orders in chronological order

    Returns:
        OrderedDict category -> {'paid', 'earned', 'claimed'}, in first-seen order
    """
    counters = OrderedDict()
    for order in orders:
        stats = counters.setdefault(order.drink_type, {'paid': 0, 'earned': 0, 'claimed': 0})
        if order.is_reward:
            stats['claimed'] += 1
        else:
            stats['paid'] += 1
            stats['earned'] = earned_for(stats['paid'])
    return counters


@transaction.atomic
def _rebuild_customer(customer_id) -> list[dict]:
    customer = Customer.objects.select_for_update().get(pk=customer_id)
    orders = list(customer.orders.order_by('sequence'))
    rebuilt = counters_from_orders(orders)

    changes = []
    for category, stats in rebuilt.items():
        counter = customer.get_reward_counter(category)
        before = (counter.paid, counter.earned, counter.claimed)
        after = (stats['paid'], stats['earned'], stats['claimed'])
        if before != after:
            changes.append({'category': category, 'before': before, 'after': after})
            counter.paid, counter.earned, counter.claimed = after
            counter.save()
        if stats['claimed'] > stats['earned']:
            logger.warning(
                "Customer %s has more %s rewards claimed (%s) than earned (%s)",
                customer.id, category, stats['claimed'], stats['earned']
            )

    total_claimed = sum(stats['claimed'] for stats in rebuilt.values())
    if customer.rewards_earned != total_claimed or customer.total_orders != len(orders):
        changes.append({
            'category': None,
            'before': (customer.total_orders, customer.rewards_earned),
            'after': (len(orders), total_claimed),
        })
    customer.rewards_earned = total_claimed
    customer.total_orders = len(orders)
    customer.save(update_fields=['total_orders', 'rewards_earned', 'updated_at'])

    return changes


def rebuild_customer_rewards(*, customer: Customer, dry_run: bool = False) -> list[dict]:
    """
    Recompute one customer's counters and totals from their order history.

    Counters for categories with no orders are left untouched.

    Returns:
        List of changes, each {'category', 'before', 'after'}; category None
        marks a change to (total_orders, rewards_earned)
    """
    with customer_lock(customer.phone):
        with transaction.atomic():
            changes = _rebuild_customer(customer.pk)
            if dry_run:
                transaction.set_rollback(True)
    return changes


def rebuild_rewards(*, dry_run: bool = False) -> dict:
    """
    Rebuild reward bookkeeping for every customer.

    A customer whose rebuild fails is logged and skipped; the others proceed.

    Returns:
        dict with customers, updated, failed counts and per-customer changes
    """
    summary = {'customers': 0, 'updated': 0, 'failed': 0, 'changes': {}}

    for customer in list(Customer.objects.order_by('created_at')):
        summary['customers'] += 1
        try:
            changes = rebuild_customer_rewards(customer=customer, dry_run=dry_run)
        except DatabaseError:
            logger.exception("Failed to rebuild rewards for customer %s", customer.id)
            summary['failed'] += 1
            continue

        if changes:
            summary['updated'] += 1
            summary['changes'][str(customer.phone)] = changes

    logger.info(
        "Rebuilt rewards for %s customers (%s changed, %s failed%s)",
        summary['customers'], summary['updated'], summary['failed'],
        ', dry run' if dry_run else ''
    )
    return summary


def rename_category(*, old: str, new: str, dry_run: bool = False) -> dict:
    """
    Rename a drink category across orders, reward counters and the menu.

    When a customer already has a counter for the new name, the two are
    merged: paid and claimed are summed, earned is recomputed and the
    old-name counter row is deleted. This is the only place a counter is
    ever removed; the ledger itself never deletes one.

    Args:
        old: Category name to replace
        new: Replacement category name
        dry_run: Report what would change without saving

    Returns:
        dict with orders, counters, merged and menu_items counts

    Raises:
        InvalidRequestError: If a name is empty or both names are equal
    """
    old = (old or '').strip()
    new = (new or '').strip()
    if not old or not new:
        raise InvalidRequestError("Both category names are required")
    if old == new:
        raise InvalidRequestError("New category name must differ from the old one")

    summary = {'orders': 0, 'counters': 0, 'merged': 0, 'menu_items': 0}

    with transaction.atomic():
        customer_ids = list(
            RewardCounter.objects
            .filter(category=old)
            .values_list('customer_id', flat=True)
        )
        # Lock affected customers so ledger writes wait for the rename
        list(Customer.objects.select_for_update().filter(pk__in=customer_ids))

        summary['orders'] = Order.objects.filter(drink_type=old).update(drink_type=new)

        for counter in RewardCounter.objects.filter(category=old).select_related('customer'):
            target = RewardCounter.objects.filter(
                customer=counter.customer, category=new
            ).first()
            if target is None:
                counter.category = new
                counter.save(update_fields=['category', 'updated_at'])
                summary['counters'] += 1
                continue

            target.paid += counter.paid
            target.claimed += counter.claimed
            target.earned = earned_for(target.paid)
            target.save()
            counter.delete()
            summary['merged'] += 1

        summary['menu_items'] = MenuItem.objects.filter(category=old).update(category=new)

        if dry_run:
            transaction.set_rollback(True)

    logger.info(
        "Renamed category %r to %r: %s orders, %s counters, %s merged, %s menu items%s",
        old, new, summary['orders'], summary['counters'], summary['merged'],
        summary['menu_items'], ' (dry run)' if dry_run else ''
    )
    return summary
