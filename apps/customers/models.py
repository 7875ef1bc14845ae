from django.db import models
from django.db.models import Max
from django.utils import timezone
from decimal import Decimal
import uuid

from .rewards import reward_record


class Customer(models.Model):
    """A shop customer, identified by phone number."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, unique=True)

    # Denormalized counters maintained by the reward ledger
    total_orders = models.PositiveIntegerField(default=0)
    # Counts redeemed rewards (reward orders), not unlocked ones
    rewards_earned = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['-updated_at'], name='customer_updated_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    @property
    def rewards(self):
        """Reward counters keyed by category."""
        return {counter.category: counter for counter in self.reward_counters.all()}

    def get_reward_counter(self, category):
        """Return the counter for a category, creating a zeroed one if missing."""
        counter, _ = RewardCounter.objects.get_or_create(customer=self, category=category)
        return counter

    def next_order_sequence(self):
        last = self.orders.aggregate(last=Max('sequence'))['last']
        return (last or 0) + 1

    def reward_records(self):
        """Derived reward record for every category, alphabetically."""
        return [
            counter.as_record()
            for counter in sorted(self.reward_counters.all(), key=lambda c: c.category)
        ]


class Order(models.Model):
    """One drink sold or given away. Never edited after creation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    # Position in the customer's history, 1-based
    sequence = models.PositiveIntegerField()

    drink_type = models.CharField(max_length=50)
    item_name = models.CharField(max_length=200)
    item = models.ForeignKey(
        'menu.MenuItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    date = models.DateTimeField(default=timezone.now)
    is_reward = models.BooleanField(default=False)
    claimed = models.BooleanField(default=True)

    class Meta:
        db_table = 'customer_orders'
        ordering = ['customer', 'sequence']
        constraints = [
            models.UniqueConstraint(
                fields=['customer', 'sequence'],
                name='unique_order_sequence_per_customer'
            ),
        ]
        indexes = [
            models.Index(fields=['date'], name='order_date_idx'),
            models.Index(fields=['drink_type'], name='order_drink_type_idx'),
        ]

    def __str__(self):
        kind = 'reward' if self.is_reward else f'{self.price}'
        return f"{self.item_name} ({kind})"


class RewardCounter(models.Model):
    """Per-(customer, category) loyalty counter."""

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name='reward_counters'
    )
    category = models.CharField(max_length=50)
    paid = models.PositiveIntegerField(default=0)
    earned = models.PositiveIntegerField(default=0)
    claimed = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_counters'
        ordering = ['customer', 'category']
        constraints = [
            models.UniqueConstraint(
                fields=['customer', 'category'],
                name='unique_reward_counter_per_category'
            ),
        ]

    def __str__(self):
        return f"{self.customer_id} {self.category}: {self.paid}/{self.earned}/{self.claimed}"

    @property
    def pending(self):
        return self.earned - self.claimed

    def as_record(self):
        return reward_record(self.category, self.paid, self.earned, self.claimed)
