"""
API Tests for Payment Endpoints
"""

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from Billing.Invoice.status import InvoiceStatus
from Billing.Invoice.tests.fixtures import create_client, create_invoice
from Billing.payments.models import Payment, PaymentMethod


class PaymentAPITestCase(APITestCase):
    """Base test case with common setup"""

    def setUp(self):
        self.invoice = create_invoice(create_client(), amount='1000.00', status=InvoiceStatus.SENT)
        self.payments_url = reverse('billing:payments:invoice-payments', args=[self.invoice.pk])

    def pay(self, amount, method='BANK_TRANSFER', **extra):
        return self.client.post(self.payments_url, {'amount': amount, 'method': method, **extra})


class RecordPaymentAPITest(PaymentAPITestCase):

    def test_record_partial(self):
        response = self.pay('800.00', notes='first instalment')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['payment']['amount'], '800.00')
        self.assertEqual(response.data['invoice']['status'], 'SENT')
        self.assertEqual(response.data['summary']['remaining_amount'], '200.00')
        self.assertFalse(response.data['summary']['is_fully_paid'])

    def test_record_full(self):
        response = self.pay('1000.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['invoice']['status'], 'PAID')
        self.assertIsNotNone(response.data['invoice']['paid_date'])
        self.assertTrue(response.data['summary']['is_fully_paid'])

    def test_overpayment_is_400(self):
        self.pay('300.00')
        response = self.pay('750.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['status'], 'error')
        self.assertIn('Already paid: $300.00', response.data['message'])
        self.assertEqual(response.data['data']['error'], 'OVERPAYMENT_REJECTED')
        self.assertEqual(Payment.objects.count(), 1)

    def test_zero_amount_is_400(self):
        response = self.pay('0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Payment.objects.count(), 0)

    def test_invalid_method_is_400(self):
        response = self.pay('10.00', method='BARTER')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_invoice_is_404(self):
        url = reverse('billing:payments:invoice-payments', args=[999999])
        response = self.client.post(url, {'amount': '10.00', 'method': 'CASH'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['data']['error'], 'INVOICE_NOT_FOUND')

    def test_history(self):
        self.pay('100.00', method='CASH')
        self.pay('200.00', method='CHECK')
        response = self.client.get(self.payments_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['payments']), 2)
        self.assertEqual(response.data['summary']['total_paid'], '300.00')
        self.assertEqual(response.data['summary']['payment_count'], 2)
        self.assertEqual(response.data['summary']['payments_by_method'], {'CASH': '100.00', 'CHECK': '200.00'})


class PaymentDetailAPITest(PaymentAPITestCase):

    def setUp(self):
        super().setUp()
        self.first = Payment.objects.get(pk=self.pay('600.00').data['payment']['id'])
        self.second = Payment.objects.get(pk=self.pay('400.00').data['payment']['id'])

    def test_get(self):
        response = self.client.get(reverse('billing:payments:payment-detail', args=[self.first.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amount'], '600.00')

    def test_patch_amount_downgrades(self):
        url = reverse('billing:payments:payment-detail', args=[self.second.pk])
        response = self.client.patch(url, {'amount': '150.00'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['invoice']['status'], 'SENT')
        self.assertEqual(response.data['summary']['total_paid'], '750.00')

    def test_patch_overpayment(self):
        url = reverse('billing:payments:payment-detail', args=[self.second.pk])
        response = self.client.patch(url, {'amount': '401.00'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Other payments total: $600.00', response.data['message'])

    def test_delete(self):
        url = reverse('billing:payments:payment-detail', args=[self.first.pk])
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['deleted_payment_id'], self.first.pk)
        self.assertEqual(data['remaining_paid_amount'], '400.00')
        self.assertEqual(data['invoice_status'], 'SENT')
        self.invoice.refresh_from_db()
        self.assertIsNone(self.invoice.paid_date)
        self.assertEqual(self.invoice.total_paid(), Decimal('400.00'))

    def test_delete_missing(self):
        response = self.client.delete(reverse('billing:payments:payment-detail', args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['data']['error'], 'PAYMENT_NOT_FOUND')

    def test_other_method_stays_unchanged(self):
        url = reverse('billing:payments:payment-detail', args=[self.first.pk])
        response = self.client.patch(url, {'method': PaymentMethod.CREDIT_CARD})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['payment']['method'], 'CREDIT_CARD')
        self.assertEqual(response.data['payment']['amount'], '600.00')
