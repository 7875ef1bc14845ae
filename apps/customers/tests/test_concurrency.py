"""
Concurrency tests for the reward ledger.

TransactionTestCase is required here: a regular TestCase wraps each test in
a transaction, so threads would never see each other's commits.
"""

import threading
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from apps.customers.models import Customer, Order
from apps.customers.services import record_purchase, claim_reward, NoRewardsAvailableError
from apps.menu.models import MenuItem


class TestLedgerConcurrency(TransactionTestCase):
    """Simultaneous ledger writes for one customer."""

    def setUp(self):
        self.item = MenuItem.objects.create(
            name='Classic Mojito',
            category='Mojito',
            price=Decimal('50.00'),
        )

    def run_in_threads(self, target, count):
        results = []
        errors = []

        def worker():
            try:
                results.append(target())
            except NoRewardsAvailableError as e:
                errors.append(str(e))
            except Exception as e:
                errors.append(f"Unexpected error: {e}")
            finally:
                connection.close()

        threads = [threading.Thread(target=worker) for _ in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return results, errors

    def purchase(self):
        return record_purchase(
            customer_name='Asha',
            customer_phone='9000000001',
            category='Mojito',
            item_id=self.item.id,
            item_name=self.item.name,
            price=self.item.price,
        )

    def test_simultaneous_first_purchases_create_one_customer(self):
        """Two first purchases for one phone: one customer, both orders."""
        results, errors = self.run_in_threads(self.purchase, 2)

        assert errors == [], errors
        assert len(results) == 2

        customer = Customer.objects.get(phone='9000000001')
        assert Customer.objects.count() == 1
        assert customer.total_orders == 2
        assert customer.get_reward_counter('Mojito').paid == 2
        assert sorted(customer.orders.values_list('sequence', flat=True)) == [1, 2]

    def test_no_lost_purchases(self):
        results, errors = self.run_in_threads(self.purchase, 10)

        assert errors == [], errors

        customer = Customer.objects.get(phone='9000000001')
        counter = customer.get_reward_counter('Mojito')
        assert customer.total_orders == 10
        assert (counter.paid, counter.earned) == (10, 2)
        assert Order.objects.count() == 10

    def test_concurrent_claims_cannot_overdraw(self):
        """Five paid drinks unlock one reward; only one of five claims wins."""
        for _ in range(5):
            customer, _ = self.purchase()

        results, errors = self.run_in_threads(
            lambda: claim_reward(customer_id=customer.id, category='Mojito'),
            5
        )

        assert len(results) == 1
        assert errors == ['No rewards available to claim'] * 4

        customer.refresh_from_db()
        counter = customer.get_reward_counter('Mojito')
        assert (counter.paid, counter.earned, counter.claimed) == (5, 1, 1)
        assert customer.rewards_earned == 1
        assert customer.orders.filter(is_reward=True).count() == 1
