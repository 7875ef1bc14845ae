"""
Management command to rename a drink category.

Renames the category on orders, reward counters and menu items. A customer
who already has a counter under the new name gets the two merged.

Usage:
    python manage.py rename_category "Fresh Juice" Juice
    python manage.py rename_category "Fresh Juice" Juice --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from apps.customers.services import rename_category, InvalidRequestError


class Command(BaseCommand):
    help = 'Rename a drink category across orders, reward counters and the menu'

    def add_arguments(self, parser):
        parser.add_argument('old', help='Current category name')
        parser.add_argument('new', help='New category name')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        try:
            summary = rename_category(old=options['old'], new=options['new'], dry_run=dry_run)
        except InvalidRequestError as e:
            raise CommandError(str(e))

        self.stdout.write(f'  Orders:        {summary["orders"]}')
        self.stdout.write(f'  Counters:      {summary["counters"]}')
        self.stdout.write(f'  Merged:        {summary["merged"]}')
        self.stdout.write(f'  Menu items:    {summary["menu_items"]}')

        if dry_run:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        self.stdout.write(self.style.SUCCESS(
            f'\nRenamed "{options["old"].strip()}" to "{options["new"].strip()}".'
        ))
