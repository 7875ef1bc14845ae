"""
Management command to create demo data for the shop.

Usage:
    python manage.py seed_shop
    python manage.py seed_shop --clear

This creates:
- 1 super admin (admin@drinks.com)
- The shop profile with its defaults
- 8 menu items across 8 categories
- 4 customers with purchase history, recorded through the reward ledger
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, ShopRole
from apps.accounts.services import get_or_create_shop
from apps.customers.models import Customer
from apps.customers.services import record_purchase, claim_reward
from apps.menu.models import MenuItem


MENU = [
    ('Berry Blast Smoothie', 'Smoothie', '199', 'Mixed berries blended with yogurt'),
    ('Caramel Macchiato', 'Coffee', '149', 'Espresso with vanilla and caramel'),
    ('Mango Tango Juice', 'Juice', '129', 'Fresh mango with a hint of lime'),
    ('Chocolate Waffle', 'Waffle', '179', 'Belgian waffle with chocolate sauce'),
    ('Mint Mojito', 'Mojito', '249', 'Fresh mint, lime and soda'),
    ('Vanilla Ice Cream', 'Ice Cream', '99', 'Two scoops of vanilla'),
    ('Strawberry Milkshake', 'Milkshake', '159', 'Thick shake with fresh strawberries'),
    ('Mixed Fruit Plate', 'Fruit Plate', '189', 'Seasonal fruit, cut fresh'),
]

# (name, phone, [(item name, paid drinks)], categories to claim a reward in)
CUSTOMERS = [
    ('Priya Sharma', '9876500001', [('Mint Mojito', 6), ('Mango Tango Juice', 2)], ['Mojito']),
    ('Rahul Verma', '9876500002', [('Mango Tango Juice', 5)], []),
    ('Anita Desai', '9876500003', [('Berry Blast Smoothie', 4), ('Caramel Macchiato', 1)], []),
    ('Karan Mehta', '9876500004', [('Strawberry Milkshake', 2)], []),
]


class Command(BaseCommand):
    help = 'Create demo admin, shop profile, menu and customers'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing menu and customers before creating demo data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating demo data...')

        self.create_admin()
        get_or_create_shop()
        items = self.create_menu()
        self.create_customers(items)

        self.stdout.write(self.style.SUCCESS('Demo data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Admin account:')
        self.stdout.write('  admin@drinks.com / admin123 (super admin)')

    def clear_data(self):
        """Remove customers (with their orders and counters) and the menu."""
        Customer.objects.all().delete()
        MenuItem.objects.all().delete()

    def create_admin(self):
        self.stdout.write('  Creating admin...')

        admin, created = User.objects.get_or_create(
            email='admin@drinks.com',
            defaults={
                'username': 'admin',
                'role': ShopRole.SUPER_ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        if created:
            admin.set_password('admin123')
            admin.save()
        return admin

    def create_menu(self):
        self.stdout.write('  Creating menu items...')

        items = {}
        for name, category, price, description in MENU:
            item, _ = MenuItem.objects.get_or_create(
                name=name,
                category=category,
                defaults={
                    'price': Decimal(price),
                    'description': description,
                }
            )
            items[name] = item
        return items

    def create_customers(self, items):
        self.stdout.write('  Recording customer purchases...')

        for name, phone, purchases, claims in CUSTOMERS:
            if Customer.objects.filter(phone=phone).exists():
                continue

            for item_name, count in purchases:
                item = items[item_name]
                for _ in range(count):
                    record_purchase(
                        customer_name=name,
                        customer_phone=phone,
                        category=item.category,
                        item_id=item.id,
                        item_name=item.name,
                        price=item.price,
                    )

            customer = Customer.objects.get(phone=phone)
            for category in claims:
                claim_reward(customer_id=customer.id, category=category)
