from django.contrib import admin
from apps.customers.models import Customer, Order, RewardCounter


class OrderInline(admin.TabularInline):
    """Read-only order history. Orders are written by the reward ledger only."""
    model = Order
    extra = 0
    can_delete = False
    fields = ['sequence', 'date', 'drink_type', 'item_name', 'price', 'is_reward']
    readonly_fields = fields
    ordering = ['sequence']

    def has_add_permission(self, request, obj=None):
        return False


class RewardCounterInline(admin.TabularInline):
    model = RewardCounter
    extra = 0
    can_delete = False
    fields = ['category', 'paid', 'earned', 'claimed', 'updated_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for customers and their loyalty state."""

    list_display = ['name', 'phone', 'total_orders', 'rewards_earned', 'updated_at']
    search_fields = ['name', 'phone']
    readonly_fields = ['id', 'total_orders', 'rewards_earned', 'created_at', 'updated_at']
    inlines = [RewardCounterInline, OrderInline]
