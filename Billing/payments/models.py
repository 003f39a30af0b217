from django.db import models
from django.utils import timezone

from Billing.core.models import TimestampMixin


class PaymentMethod(models.TextChoices):
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank Transfer'
    CREDIT_CARD = 'CREDIT_CARD', 'Credit Card'
    CHECK = 'CHECK', 'Check'
    CASH = 'CASH', 'Cash'
    OTHER = 'OTHER', 'Other'


class Payment(TimestampMixin):
    """
    Money received against exactly one invoice.

    Payments are written only through PaymentLedgerService, which keeps the
    sum of an invoice's payments within its amount and updates the invoice
    status to match.
    """
    NOTES_MAX_LENGTH = 500

    invoice = models.ForeignKey(
        'billing_invoice.Invoice',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    paid_date = models.DateTimeField(default=timezone.now)
    notes = models.CharField(max_length=NOTES_MAX_LENGTH, blank=True, default='')

    class Meta:
        db_table = 'payment'
        ordering = ['-paid_date', 'id']
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='payment_amount_positive'),
        ]

    def __str__(self):
        return f"Payment #{self.pk} - {self.amount} via {self.get_method_display()}"
