"""
Invoice Services

Manual invoice operations: creation, user-driven status changes, deletion
and the overdue sweep. Payment-driven status changes live in the payment
ledger (Billing.payments.services).
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from Billing.clients.models import Client
from Billing.core.exceptions import (
    ClientNotFound,
    InvalidStatus,
    InvoiceDeleteNotAllowed,
    InvoiceNotFound,
    InvoiceNumberExists,
    InvoiceUpdateNotAllowed,
    OrderNotFound,
    ValidationFailed,
)
from Billing.core.models import Currency
from Billing.core.money import positive_money
from Billing.Invoice.dtos import InvoiceCreateDTO, InvoiceUpdateDTO
from Billing.Invoice.models import Invoice
from Billing.Invoice.numbering import next_invoice_number
from Billing.Invoice.status import InvoiceStatus, is_valid_status, manual_transition
from Billing.orders.models import Order

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service layer for Invoice business logic"""

    @staticmethod
    def get_invoice(invoice_id) -> Invoice:
        try:
            return Invoice.objects.select_related('client', 'order').get(pk=invoice_id)
        except Invoice.DoesNotExist:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found", invoice_id=invoice_id)

    @staticmethod
    def lock_invoice(invoice_id) -> Invoice:
        """Fetch an invoice holding its row lock until the surrounding transaction ends."""
        try:
            return Invoice.objects.select_for_update().get(pk=invoice_id)
        except Invoice.DoesNotExist:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found", invoice_id=invoice_id)

    @staticmethod
    @transaction.atomic
    def create_invoice(dto: InvoiceCreateDTO) -> Invoice:
        """
        Create a DRAFT invoice.

        Without an explicit invoice number one is drawn from the yearly
        sequence; an explicit number must not already be in use.
        Due date defaults to issue date plus the default net terms.
        """
        amount = positive_money(dto.amount)

        if not Client.objects.filter(pk=dto.client_id).exists():
            raise ClientNotFound(f"Client {dto.client_id} not found", client_id=dto.client_id)
        if dto.order_id is not None and not Order.objects.filter(pk=dto.order_id).exists():
            raise OrderNotFound(f"Order {dto.order_id} not found", order_id=dto.order_id)

        currency = dto.currency or settings.BILLING_DEFAULT_CURRENCY
        if currency not in Currency.values:
            raise ValidationFailed({'currency': f"Unsupported currency '{currency}'"})

        issue_date = dto.issue_date or timezone.now()
        due_date = dto.due_date or issue_date + timedelta(days=settings.BILLING_DEFAULT_NET_TERMS_DAYS)
        if due_date < issue_date:
            raise ValidationFailed({'due_date': 'Due date cannot be before the issue date'})

        if dto.invoice_number:
            invoice_number = dto.invoice_number.strip()
            if Invoice.objects.filter(invoice_number=invoice_number).exists():
                raise InvoiceNumberExists(
                    f"Invoice number {invoice_number} already exists",
                    invoice_number=invoice_number,
                )
        else:
            invoice_number = next_invoice_number(issue_date.year)

        try:
            with transaction.atomic():
                invoice = Invoice.objects.create(
                    client_id=dto.client_id,
                    order_id=dto.order_id,
                    invoice_number=invoice_number,
                    description=dto.description or '',
                    amount=amount,
                    currency=currency,
                    issue_date=issue_date,
                    due_date=due_date,
                    status=InvoiceStatus.DRAFT,
                )
        except IntegrityError:
            # lost a race with another writer using the same explicit number
            raise InvoiceNumberExists(
                f"Invoice number {invoice_number} already exists",
                invoice_number=invoice_number,
            )

        logger.info(f"Created invoice {invoice.invoice_number} for client {dto.client_id}: {amount} {currency}")
        return invoice

    @staticmethod
    @transaction.atomic
    def update_invoice(invoice_id, dto: InvoiceUpdateDTO) -> Invoice:
        """
        Edit the terms of a DRAFT invoice.

        Only the fields set on the DTO change. Once an invoice has been sent
        its terms are fixed; cancel it and issue a new one instead.

        Raises:
            InvoiceNotFound: no such invoice
            InvoiceUpdateNotAllowed: the invoice is not a DRAFT
            ValidationFailed: bad amount, currency or dates
        """
        invoice = InvoiceService.lock_invoice(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise InvoiceUpdateNotAllowed(invoice_id=invoice.pk, current_status=invoice.status)

        changed = []
        if dto.amount is not None:
            invoice.amount = positive_money(dto.amount)
            changed.append('amount')
        if dto.currency is not None:
            if dto.currency not in Currency.values:
                raise ValidationFailed({'currency': f"Unsupported currency '{dto.currency}'"})
            invoice.currency = dto.currency
            changed.append('currency')
        if dto.description is not None:
            invoice.description = dto.description
            changed.append('description')
        if dto.issue_date is not None:
            invoice.issue_date = dto.issue_date
            changed.append('issue_date')
        if dto.due_date is not None:
            invoice.due_date = dto.due_date
            changed.append('due_date')

        if invoice.due_date < invoice.issue_date:
            raise ValidationFailed({'due_date': 'Due date cannot be before the issue date'})

        if changed:
            invoice.save(update_fields=changed + ['updated_at'])
            logger.info(f"Updated draft invoice {invoice.invoice_number}: {', '.join(changed)}")
        return invoice

    @staticmethod
    @transaction.atomic
    def update_status(invoice_id, new_status, now=None) -> Invoice:
        """
        Manually change an invoice's status.

        Raises:
            InvalidStatus: new_status is not a known status (checked first)
            InvoiceNotFound: no such invoice
            InvalidStatusTransition: the change is not allowed from the current status
        """
        if not is_valid_status(new_status):
            raise InvalidStatus(
                f"Invalid status '{new_status}'. Must be one of: {', '.join(InvoiceStatus.values)}",
                status=new_status,
            )

        invoice = InvoiceService.lock_invoice(invoice_id)
        change = manual_transition(invoice.status, new_status)
        invoice.save_status_change(change, when=now or timezone.now())
        return invoice

    @staticmethod
    @transaction.atomic
    def delete_invoice(invoice_id) -> dict:
        """Delete a DRAFT invoice together with its payments."""
        invoice = InvoiceService.lock_invoice(invoice_id)
        if not invoice.is_deletable():
            raise InvoiceDeleteNotAllowed(current_status=invoice.status)

        invoice_number = invoice.invoice_number
        invoice.delete()
        logger.info(f"Deleted draft invoice {invoice_number}")
        return {'deleted_invoice_id': invoice_id}

    @staticmethod
    @transaction.atomic
    def mark_overdue_invoices(now=None) -> int:
        """Move every SENT invoice past its due date to OVERDUE. Returns how many moved."""
        now = now or timezone.now()
        updated = InvoiceService.overdue_candidates(now).update(status=InvoiceStatus.OVERDUE, updated_at=now)
        if updated:
            logger.info(f"Marked {updated} invoice(s) overdue")
        return updated

    @staticmethod
    def overdue_candidates(now=None):
        now = now or timezone.now()
        return Invoice.objects.filter(status=InvoiceStatus.SENT, due_date__lt=now)
