"""
Management command to rebuild reward counters from order history.

Replays every customer's orders: paid orders bump the category's paid count
and recompute earned rewards, reward orders bump claimed. Customer totals
(total_orders, rewards_earned) are recomputed as well.

Usage:
    python manage.py rebuild_rewards
    python manage.py rebuild_rewards --dry-run
"""

from django.core.management.base import BaseCommand
from apps.customers.services import rebuild_rewards


class Command(BaseCommand):
    help = 'Rebuild every customer\'s reward counters from their order history'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        summary = rebuild_rewards(dry_run=dry_run)

        if summary['customers'] == 0:
            self.stdout.write(self.style.SUCCESS('No customers found. Nothing to rebuild.'))
            return

        for phone, changes in summary['changes'].items():
            self.stdout.write(f'\nCustomer {phone}:')
            for change in changes:
                if change['category'] is None:
                    before_orders, before_rewards = change['before']
                    after_orders, after_rewards = change['after']
                    self.stdout.write(
                        f'  - totals: orders {before_orders} -> {after_orders}, '
                        f'rewards {before_rewards} -> {after_rewards}'
                    )
                else:
                    before = '/'.join(str(value) for value in change['before'])
                    after = '/'.join(str(value) for value in change['after'])
                    self.stdout.write(
                        f'  - {change["category"]}: paid/earned/claimed {before} -> {after}'
                    )

        if summary['failed']:
            self.stdout.write(
                self.style.ERROR(f'\n{summary["failed"]} customer(s) failed, see the log.')
            )

        if dry_run:
            self.stdout.write(self.style.WARNING(
                f'\n--dry-run mode: {summary["updated"]} of {summary["customers"]} '
                f'customer(s) would change. No changes made.'
            ))
            return

        self.stdout.write(self.style.SUCCESS(
            f'\nRebuilt rewards for {summary["customers"]} customer(s), '
            f'{summary["updated"]} updated.'
        ))
