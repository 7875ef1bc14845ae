from rest_framework import serializers
from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    """Main serializer for menu items."""

    class Meta:
        model = MenuItem
        fields = [
            'id',
            'name',
            'category',
            'price',
            'image',
            'description',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class MenuItemWriteSerializer(serializers.Serializer):
    """
    Input for creating or updating a menu item.

    Accepts multipart form data so an image file can be uploaded with the
    item; image_url is used instead when the image is already hosted.
    """

    name = serializers.CharField(max_length=200, allow_blank=True)
    category = serializers.CharField(max_length=50, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.FileField(required=False, allow_null=True)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    is_active = serializers.BooleanField(default=True)


class MenuItemToggleSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class TopSellerSerializer(MenuItemSerializer):
    """Menu item with its number of paid orders."""

    sold = serializers.IntegerField(read_only=True)

    class Meta(MenuItemSerializer.Meta):
        fields = MenuItemSerializer.Meta.fields + ['sold']
        read_only_fields = fields
