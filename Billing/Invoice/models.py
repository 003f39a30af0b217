import logging
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from Billing.core.models import Currency, TimestampMixin
from Billing.Invoice.status import InvoiceStatus, StatusChange

logger = logging.getLogger(__name__)


def default_currency():
    return settings.BILLING_DEFAULT_CURRENCY


class Invoice(TimestampMixin):
    """
    An invoice billed to a client, optionally generated from a recurring order.

    ``status`` caches a derived fact: an invoice is PAID exactly when its
    payments cover ``amount``. The payment ledger keeps the two in step;
    manual status changes go through Billing.Invoice.status.
    """
    client = models.ForeignKey(
        'billing_clients.Client',
        on_delete=models.CASCADE,
        related_name='invoices'
    )
    # RESTRICT (not PROTECT) so a client cascade may still remove both
    order = models.ForeignKey(
        'billing_orders.Order',
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='invoices'
    )
    invoice_number = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=500, blank=True, default='')
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=default_currency)
    issue_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateTimeField()
    sent_date = models.DateTimeField(null=True, blank=True)
    paid_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT
    )

    class Meta:
        db_table = 'invoice'
        ordering = ['-issue_date', '-id']
        indexes = [
            models.Index(fields=['status', 'due_date'], name='invoice_status_due_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='invoice_amount_positive'),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.amount} {self.currency} ({self.status})"

    # ==================== PAYMENT HELPERS ====================

    def total_paid(self):
        """Sum of all payments recorded against this invoice."""
        total = self.payments.aggregate(total=Sum('amount'))['total']
        return total or Decimal('0.00')

    def remaining_amount(self, total_paid=None):
        """Outstanding balance, never negative."""
        if total_paid is None:
            total_paid = self.total_paid()
        return max(self.amount - total_paid, Decimal('0.00'))

    def is_fully_paid(self, total_paid=None):
        if total_paid is None:
            total_paid = self.total_paid()
        return total_paid >= self.amount

    def is_paid(self):
        return self.status == InvoiceStatus.PAID

    def is_deletable(self):
        return self.status == InvoiceStatus.DRAFT

    # ==================== STATUS HELPERS ====================

    def apply_status_change(self, change: StatusChange, when=None, paid_at=None):
        """
        Apply a StatusChange in memory and return the fields that changed.

        Args:
            change: result of one of the Billing.Invoice.status functions
            when: timestamp for sent_date (and paid_date without paid_at)
            paid_at: timestamp to use for paid_date, e.g. the payment's date
        """
        when = when or timezone.now()
        updated = []
        if change.changed:
            logger.info(f"Invoice {self.invoice_number}: {change.previous} -> {change.status}")
            self.status = change.status
            updated.append('status')
        if change.mark_sent:
            self.sent_date = when
            updated.append('sent_date')
        if change.mark_paid:
            self.paid_date = paid_at or when
            updated.append('paid_date')
        elif change.clear_paid:
            self.paid_date = None
            updated.append('paid_date')
        return updated

    def save_status_change(self, change: StatusChange, when=None, paid_at=None):
        updated = self.apply_status_change(change, when=when, paid_at=paid_at)
        if updated:
            self.save(update_fields=updated + ['updated_at'])
        return updated


class InvoiceNumberSequence(models.Model):
    """Last issued invoice sequence number per year."""
    year = models.PositiveIntegerField(unique=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'invoice_number_sequence'

    def __str__(self):
        return f"{self.year}: {self.last_value}"
