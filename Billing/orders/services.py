"""
Recurring Order Scheduler

Turns recurring orders into DRAFT invoices and projects when the next ones
will fall due. Invoice generation and the advance of the order's
next_invoice_date happen in one transaction under the order's row lock.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from Billing.clients.models import Client
from Billing.core.exceptions import (
    BillingError,
    ClientNotFound,
    InvalidStatus,
    OrderNotActive,
    OrderNotFound,
    ValidationFailed,
)
from Billing.core.money import positive_money
from Billing.Invoice.dtos import InvoiceCreateDTO
from Billing.Invoice.services import InvoiceService
from Billing.orders import scheduling
from Billing.orders.choices import OrderStatus
from Billing.orders.dtos import OrderCreateDTO, OrderUpdateDTO
from Billing.orders.models import Order

logger = logging.getLogger(__name__)


class OrderSchedulerService:
    """Service layer for recurring order business logic"""

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.select_related('client').get(pk=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(f"Order {order_id} not found", order_id=order_id)

    @staticmethod
    def lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(f"Order {order_id} not found", order_id=order_id)

    @staticmethod
    @transaction.atomic
    def create_order(dto: OrderCreateDTO) -> Order:
        """
        Create an ACTIVE order. Its first invoice falls one period after the
        start date.
        """
        if not Client.objects.filter(pk=dto.client_id).exists():
            raise ClientNotFound(f"Client {dto.client_id} not found", client_id=dto.client_id)

        amount = OrderSchedulerService._validate_terms(dto)

        order = Order.objects.create(
            client_id=dto.client_id,
            description=dto.description.strip(),
            amount=amount,
            frequency=dto.frequency,
            custom_days=dto.custom_days,
            lead_time_days=dto.lead_time_days,
            start_date=dto.start_date,
            next_invoice_date=scheduling.calculate_next_invoice_date(
                dto.start_date, dto.frequency, dto.custom_days
            ),
            status=OrderStatus.ACTIVE,
        )
        logger.info(
            f"Created order #{order.pk} for client {dto.client_id}: {amount} {order.frequency_text}, "
            f"first invoice {order.next_invoice_date}"
        )
        return order

    @staticmethod
    def _validate_terms(dto: OrderCreateDTO):
        """Check amount, frequency, lead time and description. Returns the amount as money."""
        amount = positive_money(dto.amount)

        is_valid, error = scheduling.validate_frequency(dto.frequency, dto.custom_days)
        if not is_valid:
            raise ValidationFailed({'frequency': error})

        is_valid, error = scheduling.validate_lead_time(dto.lead_time_days)
        if not is_valid:
            raise ValidationFailed({'lead_time_days': error})

        if not (dto.description or '').strip():
            raise ValidationFailed({'description': 'Description is required'})
        return amount

    @staticmethod
    @transaction.atomic
    def update_order(order_id, dto: OrderUpdateDTO) -> Order:
        """
        Replace an order's terms.

        next_invoice_date is recomputed from start_date only when the
        frequency, custom_days or start_date change; otherwise the pending
        date is kept so already generated invoices are not repeated.

        Raises:
            OrderNotFound: no such order
            ClientNotFound: the order is moved to an unknown client
            ValidationFailed: bad amount, frequency, lead time or description
        """
        amount = OrderSchedulerService._validate_terms(dto)
        order = OrderSchedulerService.lock_order(order_id)

        if dto.client_id != order.client_id and not Client.objects.filter(pk=dto.client_id).exists():
            raise ClientNotFound(f"Client {dto.client_id} not found", client_id=dto.client_id)

        reschedule = (
            dto.frequency != order.frequency
            or dto.custom_days != order.custom_days
            or dto.start_date != order.start_date
        )

        order.client_id = dto.client_id
        order.description = dto.description.strip()
        order.amount = amount
        order.frequency = dto.frequency
        order.custom_days = dto.custom_days
        order.lead_time_days = dto.lead_time_days
        order.start_date = dto.start_date
        if reschedule:
            order.next_invoice_date = scheduling.calculate_next_invoice_date(
                dto.start_date, dto.frequency, dto.custom_days
            )
        order.save()

        logger.info(
            f"Updated order #{order.pk}: {amount} {order.frequency_text}, "
            f"next invoice {order.next_invoice_date}{' (rescheduled)' if reschedule else ''}"
        )
        return order

    @staticmethod
    @transaction.atomic
    def update_order_status(order_id, new_status) -> Order:
        if new_status not in OrderStatus.values:
            raise InvalidStatus(
                f"Invalid status '{new_status}'. Must be one of: {', '.join(OrderStatus.values)}",
                status=new_status,
            )
        order = OrderSchedulerService.lock_order(order_id)
        if order.status != new_status:
            logger.info(f"Order #{order.pk}: {order.status} -> {new_status}")
            order.status = new_status
            order.save(update_fields=['status', 'updated_at'])
        return order

    @staticmethod
    @transaction.atomic
    def generate_invoice_from_order(order_id, invoice_number=None, now=None):
        """
        Generate the order's next invoice as a DRAFT and advance
        next_invoice_date by one period.

        Raises:
            OrderNotFound: no such order
            OrderNotActive: the order is PAUSED or CANCELLED
            InvoiceNumberExists: invoice_number is already taken
        """
        order = OrderSchedulerService.lock_order(order_id)
        if not order.is_active():
            raise OrderNotActive(
                f"Cannot generate invoice from {order.status.lower()} order",
                order_id=order.pk,
                order_status=order.status,
            )

        issue_date = now or timezone.now()
        invoice = InvoiceService.create_invoice(InvoiceCreateDTO(
            client_id=order.client_id,
            order_id=order.pk,
            amount=order.amount,
            description=order.description,
            issue_date=issue_date,
            due_date=scheduling.calculate_due_date(issue_date, order.lead_time_days),
            invoice_number=invoice_number,
        ))

        previous = order.next_invoice_date
        order.next_invoice_date = order.following_invoice_date()
        order.save(update_fields=['next_invoice_date', 'updated_at'])

        logger.info(
            f"Generated invoice {invoice.invoice_number} from order #{order.pk}; "
            f"next invoice date {previous} -> {order.next_invoice_date}"
        )
        return invoice

    @staticmethod
    def get_order_schedule(order_id, count=None) -> dict:
        """
        Project the order's upcoming invoice dates without changing the order.
        ``count`` is clamped into 1..BILLING_SCHEDULE_MAX_COUNT.
        """
        order = OrderSchedulerService.get_order(order_id)
        count = scheduling.clamp_schedule_count(count)
        schedule = scheduling.generate_invoice_schedule(
            order.next_invoice_date, order.frequency, count, order.custom_days
        )
        return {
            'order_id': order.pk,
            'order_status': order.status,
            'frequency': order.frequency_text,
            'count': count,
            'schedule': schedule,
        }

    @staticmethod
    @transaction.atomic
    def delete_order(order_id) -> dict:
        """
        Delete an order, or cancel it when invoices already reference it so
        the invoice history keeps its link.
        """
        order = OrderSchedulerService.lock_order(order_id)
        if order.has_invoices():
            if order.status != OrderStatus.CANCELLED:
                order.status = OrderStatus.CANCELLED
                order.save(update_fields=['status', 'updated_at'])
            logger.info(f"Order #{order.pk} has invoices; cancelled instead of deleted")
            return {
                'cancelled': True,
                'cancelled_order_id': order.pk,
                'reason': 'HAS_INVOICES',
            }

        order.delete()
        logger.info(f"Deleted order #{order_id}")
        return {'deleted_order_id': order_id}

    @staticmethod
    def due_orders(today=None):
        today = today or timezone.localdate()
        return Order.objects.filter(status=OrderStatus.ACTIVE, next_invoice_date__lte=today)

    @staticmethod
    def upcoming_orders(days_ahead=None, today=None):
        """
        ACTIVE orders whose next invoice falls within the next ``days_ahead``
        days. The window is clamped into 0..BILLING_UPCOMING_MAX_DAYS.
        """
        today = today or timezone.localdate()
        if days_ahead is None:
            days_ahead = settings.BILLING_UPCOMING_DAYS_AHEAD
        days_ahead = max(0, min(days_ahead, settings.BILLING_UPCOMING_MAX_DAYS))
        return Order.objects.select_related('client').filter(
            status=OrderStatus.ACTIVE,
            next_invoice_date__gte=today,
            next_invoice_date__lte=today + timedelta(days=days_ahead),
        ).order_by('next_invoice_date', 'id')

    @staticmethod
    def generate_invoices_for_due_orders(today=None, now=None) -> dict:
        """
        Generate one invoice for every ACTIVE order that is due.

        Each order is handled in its own transaction; a failure is recorded
        and the sweep moves on. PAUSED and CANCELLED orders are never picked up.
        """
        generated = []
        errors = []
        order_ids = list(OrderSchedulerService.due_orders(today).values_list('pk', flat=True))
        for order_id in order_ids:
            try:
                invoice = OrderSchedulerService.generate_invoice_from_order(order_id, now=now)
            except BillingError as exc:
                logger.error(f"Failed to generate invoice for order #{order_id}: {exc.message}")
                errors.append({'order_id': order_id, 'error': exc.error_code, 'message': exc.message})
                continue
            generated.append(invoice.invoice_number)

        logger.info(f"Due order sweep: {len(generated)} generated, {len(errors)} failed")
        return {'generated': len(generated), 'invoice_numbers': generated, 'errors': errors}
