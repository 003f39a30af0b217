from django.db import models

from Billing.core.models import TimestampMixin


class Client(TimestampMixin):
    """
    A customer of the business. Owns its recurring orders and invoices;
    deleting a client removes both, and the invoices' payments with them.
    """
    name = models.CharField(max_length=255)
    company = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField()
    phone = models.CharField(max_length=50, blank=True, default='')
    address = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'client'
        ordering = ['name', 'id']

    def __str__(self):
        return f"{self.name} ({self.company})" if self.company else self.name
