"""
Test fixtures and helper functions for billing tests.

Shared by the Invoice, payments and orders test suites.
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.db import connection

from Billing.clients.models import Client
from Billing.Invoice.models import Invoice
from Billing.Invoice.status import InvoiceStatus
from Billing.orders.choices import OrderFrequency, OrderStatus
from Billing.orders.models import Order

_invoice_counter = 0


def aware(year, month, day, hour=12, minute=0):
    """Timezone-aware UTC datetime"""
    return datetime(year, month, day, hour, minute, tzinfo=dt_timezone.utc)


def create_client(name='Acme Ltd', email='billing@acme.test', company='Acme'):
    """Create a test client"""
    return Client.objects.create(name=name, email=email, company=company)


def create_invoice(client=None, amount='1000.00', status=InvoiceStatus.DRAFT, order=None,
                   invoice_number=None, issue_date=None, due_date=None, **extra):
    """Create a test invoice directly (bypassing the services)"""
    global _invoice_counter
    _invoice_counter += 1
    if client is None:
        client = create_client()
    issue_date = issue_date or aware(2025, 1, 1)
    return Invoice.objects.create(
        client=client,
        order=order,
        invoice_number=invoice_number or f'TEST-{_invoice_counter:06d}',
        amount=Decimal(amount),
        status=status,
        issue_date=issue_date,
        due_date=due_date or issue_date + timedelta(days=30),
        **extra
    )


def create_order(client=None, amount='250.00', frequency=OrderFrequency.MONTHLY, custom_days=None,
                 lead_time_days=None, start_date=date(2025, 1, 1), next_invoice_date=None,
                 status=OrderStatus.ACTIVE, description='Monthly retainer'):
    """Create a test order directly (bypassing the services)"""
    if client is None:
        client = create_client()
    return Order.objects.create(
        client=client,
        description=description,
        amount=Decimal(amount),
        frequency=frequency,
        custom_days=custom_days,
        lead_time_days=lead_time_days,
        start_date=start_date,
        next_invoice_date=next_invoice_date or start_date,
        status=status,
    )


def uses_memory_database():
    """True when the test database is an in-memory SQLite one, which threads cannot share"""
    name = str(connection.settings_dict.get('TEST', {}).get('NAME') or '')
    return connection.vendor == 'sqlite' and (not name or name == ':memory:' or 'mode=memory' in name)
