"""Shop profile service - the single shop row."""

from django.db import transaction

from apps.accounts.models import Shop

SHOP_FIELDS = ('name', 'phone', 'email', 'address', 'established', 'license')


def get_or_create_shop() -> Shop:
    """Return the shop profile, creating it with default values on first use."""
    shop = Shop.objects.order_by('pk').first()
    if shop is None:
        shop = Shop.objects.create()
    return shop


@transaction.atomic
def update_shop(**fields) -> Shop:
    """
    Update shop profile fields. Unknown keys are ignored.

    Returns:
        Updated Shop instance
    """
    shop = get_or_create_shop()
    shop = Shop.objects.select_for_update().get(pk=shop.pk)

    changed = []
    for field in SHOP_FIELDS:
        if field in fields:
            setattr(shop, field, fields[field])
            changed.append(field)

    if changed:
        shop.save(update_fields=changed + ['updated_at'])
    return shop
