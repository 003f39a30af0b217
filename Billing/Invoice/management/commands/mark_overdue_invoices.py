"""
Django management command to move SENT invoices past their due date to OVERDUE.

Usage:
    python manage.py mark_overdue_invoices
    python manage.py mark_overdue_invoices --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from Billing.Invoice.services import InvoiceService


class Command(BaseCommand):
    help = 'Mark SENT invoices whose due date has passed as OVERDUE'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the invoices that would be marked without updating them',
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No changes will be saved'))
            candidates = InvoiceService.overdue_candidates(now)
            for invoice in candidates:
                self.stdout.write(f'  {invoice.invoice_number}: due {invoice.due_date:%Y-%m-%d}')
            self.stdout.write(f'{candidates.count()} invoice(s) would be marked overdue')
            return

        updated = InvoiceService.mark_overdue_invoices(now)
        self.stdout.write(self.style.SUCCESS(f'Marked {updated} invoice(s) as overdue'))
