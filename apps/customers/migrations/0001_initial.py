# Generated manually for customers app

import uuid
from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('menu', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('phone', models.CharField(max_length=20, unique=True)),
                ('total_orders', models.PositiveIntegerField(default=0)),
                ('rewards_earned', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'customers',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['-updated_at'], name='customer_updated_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sequence', models.PositiveIntegerField()),
                ('drink_type', models.CharField(max_length=50)),
                ('item_name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('is_reward', models.BooleanField(default=False)),
                ('claimed', models.BooleanField(default=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='customers.customer')),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='menu.menuitem')),
            ],
            options={
                'db_table': 'customer_orders',
                'ordering': ['customer', 'sequence'],
                'indexes': [
                    models.Index(fields=['date'], name='order_date_idx'),
                    models.Index(fields=['drink_type'], name='order_drink_type_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('customer', 'sequence'), name='unique_order_sequence_per_customer'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RewardCounter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category', models.CharField(max_length=50)),
                ('paid', models.PositiveIntegerField(default=0)),
                ('earned', models.PositiveIntegerField(default=0)),
                ('claimed', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reward_counters', to='customers.customer')),
            ],
            options={
                'db_table': 'reward_counters',
                'ordering': ['customer', 'category'],
                'constraints': [
                    models.UniqueConstraint(fields=('customer', 'category'), name='unique_reward_counter_per_category'),
                ],
            },
        ),
    ]
