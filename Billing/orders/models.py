from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from Billing.core.models import TimestampMixin
from Billing.orders.choices import OrderFrequency, OrderStatus
from Billing.orders import scheduling


class Order(TimestampMixin):
    """
    A recurring order: bills its client ``amount`` every period.

    ``next_invoice_date`` only moves when an invoice is generated from the
    order; projecting a schedule never changes it. Once any invoice points
    at an order, deleting it cancels it instead.
    """
    client = models.ForeignKey(
        'billing_clients.Client',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    frequency = models.CharField(max_length=20, choices=OrderFrequency.choices)
    custom_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[
            MinValueValidator(scheduling.MIN_CUSTOM_DAYS),
            MaxValueValidator(scheduling.MAX_CUSTOM_DAYS),
        ],
        help_text="Days between invoices; only for CUSTOM frequency"
    )
    lead_time_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(scheduling.MAX_LEAD_TIME_DAYS)],
        help_text="Days between invoice issue and due date"
    )
    start_date = models.DateField()
    next_invoice_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.ACTIVE
    )

    class Meta:
        db_table = 'recurring_order'
        ordering = ['next_invoice_date', 'id']
        indexes = [
            models.Index(fields=['status', 'next_invoice_date'], name='order_status_next_idx'),
        ]

    def __str__(self):
        return f"Order #{self.pk} - {self.description} ({self.get_frequency_display()})"

    def clean(self):
        super().clean()
        errors = {}
        is_valid, error = scheduling.validate_frequency(self.frequency, self.custom_days)
        if not is_valid:
            errors['custom_days' if self.frequency in OrderFrequency.values else 'frequency'] = error
        is_valid, error = scheduling.validate_lead_time(self.lead_time_days)
        if not is_valid:
            errors['lead_time_days'] = error
        if self.amount is not None and self.amount <= Decimal('0'):
            errors['amount'] = "Amount must be greater than zero"
        if errors:
            raise ValidationError(errors)

    # ==================== HELPERS ====================

    def is_active(self):
        return self.status == OrderStatus.ACTIVE

    def has_invoices(self):
        return self.invoices.exists()

    def following_invoice_date(self):
        """The date the pointer moves to after the next generation."""
        return scheduling.calculate_next_invoice_date(self.next_invoice_date, self.frequency, self.custom_days)

    @property
    def frequency_text(self):
        return scheduling.frequency_display(self.frequency, self.custom_days)

    @property
    def estimated_annual_revenue(self):
        return scheduling.estimated_annual_revenue(self.amount, self.frequency, self.custom_days)
