from rest_framework import serializers
from .models import Customer, Order, RewardCounter


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for one order in a customer's history."""

    item_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            'id', 'sequence', 'drink_type', 'item_name', 'item_id',
            'price', 'date', 'is_reward', 'claimed',
        ]
        read_only_fields = fields


class RewardCounterSerializer(serializers.ModelSerializer):
    """Stored counter plus the derived progress fields."""

    pending = serializers.IntegerField(read_only=True)
    progress = serializers.SerializerMethodField()
    drinks_until_reward = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()

    class Meta:
        model = RewardCounter
        fields = [
            'category', 'paid', 'earned', 'claimed',
            'pending', 'progress', 'drinks_until_reward', 'status',
        ]
        read_only_fields = fields

    def get_progress(self, obj) -> int:
        return obj.as_record()['progress']

    def get_drinks_until_reward(self, obj) -> int:
        return obj.as_record()['drinks_until_reward']

    def get_status(self, obj) -> str:
        return obj.as_record()['status']


class CustomerSerializer(serializers.ModelSerializer):
    """Customer with reward counters keyed by category and full order history."""

    rewards = serializers.SerializerMethodField()
    orders = OrderSerializer(many=True, read_only=True)

    class Meta:
        model = Customer
        fields = [
            'id', 'name', 'phone', 'total_orders', 'rewards_earned',
            'rewards', 'orders', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_rewards(self, obj) -> dict:
        return {
            category: RewardCounterSerializer(counter).data
            for category, counter in sorted(obj.rewards.items())
        }


class PurchaseSerializer(serializers.Serializer):
    """
    Input for recording a sale at the point of sale.

    Only the shape is checked here; required-together rules and price
    positivity are enforced by the reward ledger.
    """

    customer_name = serializers.CharField(max_length=100, allow_blank=True)
    customer_phone = serializers.CharField(max_length=20, allow_blank=True)
    drink_type = serializers.CharField(max_length=50, allow_blank=True)
    item_id = serializers.UUIDField(required=False, allow_null=True)
    item_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        allow_null=True
    )
    is_reward = serializers.BooleanField(default=False)


class ClaimRewardSerializer(serializers.Serializer):
    category = serializers.CharField(max_length=50, allow_blank=True)


class CustomerQuerySerializer(serializers.Serializer):
    phone = serializers.CharField(required=False, allow_blank=True, max_length=20)


# Response serializers for API documentation

class PurchaseResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    customer = CustomerSerializer()
    is_reward = serializers.BooleanField()


class ClaimRewardResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    customer = CustomerSerializer()
    claimed_category = serializers.CharField()
