"""
API Tests for Recurring Order Endpoints
"""

from datetime import date

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from Billing.Invoice.tests.fixtures import create_client, create_order
from Billing.orders.choices import OrderStatus
from Billing.orders.models import Order


class OrderAPITestCase(APITestCase):
    """Base test case with common setup"""

    def setUp(self):
        self.client_obj = create_client()


class OrderCreateAPITest(OrderAPITestCase):

    def test_create_custom(self):
        response = self.client.post(reverse('billing:orders:order-create'), {
            'client_id': self.client_obj.pk,
            'description': 'Window cleaning',
            'amount': '80.00',
            'frequency': 'CUSTOM',
            'custom_days': 45,
            'start_date': '2025-01-01',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['next_invoice_date'], '2025-02-15')
        self.assertEqual(response.data['frequency_text'], 'Every 45 days')
        self.assertEqual(response.data['status'], 'ACTIVE')

    def test_custom_without_days_is_400(self):
        response = self.client.post(reverse('billing:orders:order-create'), {
            'client_id': self.client_obj.pk,
            'description': 'Window cleaning',
            'amount': '80.00',
            'frequency': 'CUSTOM',
            'start_date': '2025-01-01',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['status'], 'error')
        self.assertEqual(Order.objects.count(), 0)

    def test_lead_time_over_30_is_400(self):
        response = self.client.post(reverse('billing:orders:order-create'), {
            'client_id': self.client_obj.pk,
            'description': 'Hosting',
            'amount': '10.00',
            'frequency': 'MONTHLY',
            'lead_time_days': 45,
            'start_date': '2025-01-01',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class OrderActionsAPITest(OrderAPITestCase):

    def setUp(self):
        super().setUp()
        self.order = create_order(self.client_obj, start_date=date(2025, 1, 31))

    def test_schedule(self):
        url = reverse('billing:orders:order-schedule', args=[self.order.pk])
        response = self.client.get(url, {'count': 3})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['order_status'], 'ACTIVE')
        self.assertEqual(
            [entry['date'] for entry in response.data['schedule']],
            ['2025-01-31', '2025-02-28', '2025-03-28'],
        )

    def test_schedule_count_clamped(self):
        url = reverse('billing:orders:order-schedule', args=[self.order.pk])
        response = self.client.get(url, {'count': 500})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['schedule']), 20)

    def test_generate_invoice(self):
        url = reverse('billing:orders:order-generate-invoice', args=[self.order.pk])
        response = self.client.post(url, {})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'DRAFT')
        self.assertEqual(response.data['order'], self.order.pk)
        self.order.refresh_from_db()
        self.assertEqual(self.order.next_invoice_date, date(2025, 2, 28))

    def test_generate_from_paused_is_400(self):
        self.order.status = OrderStatus.PAUSED
        self.order.save()
        url = reverse('billing:orders:order-generate-invoice', args=[self.order.pk])
        response = self.client.post(url, {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['data']['error'], 'ORDER_NOT_ACTIVE')

    def test_generate_missing_is_404(self):
        url = reverse('billing:orders:order-generate-invoice', args=[999999])
        response = self.client.post(url, {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_status(self):
        url = reverse('billing:orders:order-status', args=[self.order.pk])
        response = self.client.patch(url, {'status': 'PAUSED'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'PAUSED')

    def test_delete_without_invoices(self):
        url = reverse('billing:orders:order-detail', args=[self.order.pk])
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'deleted_order_id': self.order.pk})

    def test_delete_with_invoices_cancels(self):
        self.client.post(reverse('billing:orders:order-generate-invoice', args=[self.order.pk]), {})
        response = self.client.delete(reverse('billing:orders:order-detail', args=[self.order.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['cancelled'])
        self.assertEqual(response.data['data']['reason'], 'HAS_INVOICES')
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.CANCELLED)

    def test_put_reschedules(self):
        url = reverse('billing:orders:order-detail', args=[self.order.pk])
        response = self.client.put(url, {
            'client_id': self.client_obj.pk,
            'description': 'Quarterly retainer',
            'amount': '700.00',
            'frequency': 'QUARTERLY',
            'start_date': '2025-01-31',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amount'], '700.00')
        self.assertEqual(response.data['frequency_text'], 'Quarterly')
        self.assertEqual(response.data['next_invoice_date'], '2025-04-30')

    def test_put_missing_fields_is_400(self):
        url = reverse('billing:orders:order-detail', args=[self.order.pk])
        response = self.client.put(url, {'amount': '700.00'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_put_missing_order_is_404(self):
        url = reverse('billing:orders:order-detail', args=[999999])
        response = self.client.put(url, {
            'client_id': self.client_obj.pk,
            'description': 'Hosting',
            'amount': '10.00',
            'frequency': 'MONTHLY',
            'start_date': '2025-01-01',
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['data']['error'], 'ORDER_NOT_FOUND')


class UpcomingOrdersAPITest(OrderAPITestCase):

    def test_huge_days_is_clamped(self):
        response = self.client.get(reverse('billing:orders:order-upcoming'), {'days': 1000000000})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_non_numeric_days_uses_default(self):
        response = self.client.get(reverse('billing:orders:order-upcoming'), {'days': 'soon'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
