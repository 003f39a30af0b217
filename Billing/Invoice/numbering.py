"""
Invoice number generation: <prefix>-<year>-<6 digit sequence>, e.g. INV-2025-000042.

The per-year counter row is locked for the duration of the caller's
transaction, so two concurrent generations can never draw the same value.
Numbers already taken (for instance by a caller-supplied invoice number)
are skipped.
"""
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from Billing.Invoice.models import Invoice, InvoiceNumberSequence

SEQUENCE_WIDTH = 6


def format_invoice_number(year, value, prefix=None):
    prefix = prefix or settings.BILLING_INVOICE_NUMBER_PREFIX
    return f"{prefix}-{year}-{value:0{SEQUENCE_WIDTH}d}"


def next_invoice_number(year=None):
    """Draw the next free invoice number for ``year`` (default: current year)."""
    year = year or timezone.now().year
    with transaction.atomic():
        InvoiceNumberSequence.objects.get_or_create(year=year)
        sequence = InvoiceNumberSequence.objects.select_for_update().get(year=year)
        while True:
            sequence.last_value += 1
            number = format_invoice_number(year, sequence.last_value)
            if not Invoice.objects.filter(invoice_number=number).exists():
                break
        sequence.save(update_fields=['last_value'])
    return number
