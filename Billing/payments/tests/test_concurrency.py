"""
Concurrent payments against one invoice.

Runs real threads against a real database, so it needs TransactionTestCase
and a database that threads can share (an in-memory SQLite test database
cannot be shared; settings point the SQLite test database at a file).
"""

import threading
import unittest
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from Billing.core.exceptions import OverpaymentRejected
from Billing.Invoice.status import InvoiceStatus
from Billing.Invoice.tests.fixtures import create_client, create_invoice, uses_memory_database
from Billing.payments.dtos import PaymentRecordDTO
from Billing.payments.models import Payment, PaymentMethod
from Billing.payments.services import PaymentLedgerService


@unittest.skipIf(uses_memory_database(), 'threads cannot share an in-memory SQLite database')
class ConcurrentPaymentTest(TransactionTestCase):

    def test_only_one_of_three_racing_payments_succeeds(self):
        """Three simultaneous 600.00 payments on a 1000.00 invoice: one lands, two are refused"""
        invoice = create_invoice(create_client(), amount='1000.00', status=InvoiceStatus.SENT)

        barrier = threading.Barrier(3)
        lock = threading.Lock()
        successes = []
        rejections = []
        other_errors = []

        def pay():
            try:
                barrier.wait(timeout=10)
                PaymentLedgerService.record_payment(PaymentRecordDTO(
                    invoice_id=invoice.pk,
                    amount=Decimal('600.00'),
                    method=PaymentMethod.BANK_TRANSFER,
                ))
                with lock:
                    successes.append(True)
            except OverpaymentRejected:
                with lock:
                    rejections.append(True)
            except Exception as exc:
                with lock:
                    other_errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=pay) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        self.assertEqual(other_errors, [])
        self.assertEqual(len(successes), 1)
        self.assertEqual(len(rejections), 2)
        self.assertEqual(Payment.objects.filter(invoice=invoice).count(), 1)
        invoice.refresh_from_db()
        self.assertEqual(invoice.total_paid(), Decimal('600.00'))
        self.assertEqual(invoice.status, InvoiceStatus.SENT)
