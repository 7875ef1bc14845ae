from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class MenuItem(models.Model):
    """A drink (or plate) sold by the shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=50, db_index=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    # Absolute URL or storage-relative path; placeholder when no upload given
    image = models.CharField(max_length=500, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menu_items'
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['category', 'name'], name='menu_item_category_name_idx'),
            models.Index(fields=['is_active'], name='menu_item_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})"
