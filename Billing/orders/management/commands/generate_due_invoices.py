"""
Django management command to generate invoices for every due recurring order.

Meant to run once a day from cron. PAUSED and CANCELLED orders are skipped;
a failing order is reported and the sweep carries on.

Usage:
    python manage.py generate_due_invoices
    python manage.py generate_due_invoices --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from Billing.orders.services import OrderSchedulerService


class Command(BaseCommand):
    help = 'Generate DRAFT invoices for active recurring orders that are due'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the due orders without generating anything',
        )

    def handle(self, *args, **options):
        today = timezone.localdate()

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No changes will be saved'))
            due = OrderSchedulerService.due_orders(today)
            for order in due:
                self.stdout.write(f'  Order #{order.pk}: {order.description} ({order.amount}, due {order.next_invoice_date})')
            self.stdout.write(f'{due.count()} order(s) due')
            return

        result = OrderSchedulerService.generate_invoices_for_due_orders(today=today)
        for error in result['errors']:
            self.stdout.write(self.style.ERROR(f"  Order #{error['order_id']}: {error['message']}"))
        self.stdout.write(self.style.SUCCESS(
            f"Generated {result['generated']} invoice(s), {len(result['errors'])} error(s)"
        ))
