"""
Payment Ledger Service

Records, edits and deletes payments while holding two facts true for every
invoice:

* the payments never add up to more than the invoice amount;
* the invoice is PAID exactly when they add up to the full amount.

Each operation runs in one transaction holding the invoice's row lock, so
the overpayment check and the write cannot interleave with another payment
on the same invoice.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from Billing.core.exceptions import OverpaymentRejected, PaymentNotFound, ValidationFailed
from Billing.core.money import ZERO, format_money, positive_money
from Billing.Invoice.models import Invoice
from Billing.Invoice.services import InvoiceService
from Billing.Invoice.status import after_payment_change, after_payment_removed
from Billing.payments.dtos import (
    PaymentHistory,
    PaymentRecordDTO,
    PaymentResult,
    PaymentSummary,
    PaymentUpdateDTO,
)
from Billing.payments.models import Payment, PaymentMethod

logger = logging.getLogger(__name__)


def _validate_method(method):
    if method not in PaymentMethod.values:
        raise ValidationFailed({
            'method': f"Invalid payment method '{method}'. Must be one of: {', '.join(PaymentMethod.values)}"
        })
    return method


def _validate_notes(notes):
    notes = notes or ''
    if len(notes) > Payment.NOTES_MAX_LENGTH:
        raise ValidationFailed({'notes': f"Notes cannot exceed {Payment.NOTES_MAX_LENGTH} characters"})
    return notes


def _summarize(invoice: Invoice, total_paid=None, payment_count=None, by_method=False) -> PaymentSummary:
    payments = invoice.payments.all()
    if total_paid is None or payment_count is None:
        totals = payments.aggregate(total=Sum('amount'), count=Count('id'))
        total_paid = totals['total'] or ZERO
        payment_count = totals['count']

    payments_by_method = {}
    if by_method:
        for row in payments.order_by().values('method').annotate(total=Sum('amount')).order_by('method'):
            payments_by_method[row['method']] = row['total']

    return PaymentSummary(
        invoice_amount=invoice.amount,
        total_paid=total_paid,
        remaining_amount=invoice.remaining_amount(total_paid),
        is_fully_paid=invoice.is_fully_paid(total_paid),
        payment_count=payment_count,
        payments_by_method=payments_by_method,
    )


class PaymentLedgerService:
    """Service layer for payments against invoices"""

    @staticmethod
    @transaction.atomic
    def record_payment(dto: PaymentRecordDTO) -> PaymentResult:
        """
        Record a payment against an invoice.

        A DRAFT invoice moves to SENT; an invoice the payment fully covers
        moves to PAID, with paid_date set to the payment's date.

        Raises:
            ValidationFailed: amount not positive, unknown method, notes too long
            InvoiceNotFound: no such invoice
            OverpaymentRejected: the payment would take the total above the invoice amount
        """
        amount = positive_money(dto.amount)
        method = _validate_method(dto.method)
        notes = _validate_notes(dto.notes)

        invoice = InvoiceService.lock_invoice(dto.invoice_id)
        already_paid = invoice.total_paid()

        if already_paid + amount > invoice.amount:
            maximum = invoice.remaining_amount(already_paid)
            logger.warning(
                f"Rejected payment of {amount} on invoice {invoice.invoice_number}: "
                f"already paid {already_paid} of {invoice.amount}"
            )
            raise OverpaymentRejected(
                f"Payment amount would exceed invoice total. "
                f"Invoice amount: {format_money(invoice.amount)}, "
                f"Already paid: {format_money(already_paid)}, "
                f"Maximum additional payment: {format_money(maximum)}",
                invoice_amount=invoice.amount,
                already_paid=already_paid,
                maximum_payment=maximum,
            )

        paid_date = dto.paid_date or timezone.now()
        payment = Payment.objects.create(
            invoice=invoice,
            amount=amount,
            method=method,
            paid_date=paid_date,
            notes=notes,
        )

        total_paid = already_paid + amount
        change = after_payment_change(invoice.status, invoice.is_fully_paid(total_paid))
        invoice.save_status_change(change, paid_at=paid_date)

        logger.info(
            f"Recorded payment #{payment.pk} of {amount} on invoice {invoice.invoice_number} "
            f"({total_paid}/{invoice.amount}, status {invoice.status})"
        )
        return PaymentResult(payment=payment, invoice=invoice, summary=_summarize(invoice))

    @staticmethod
    @transaction.atomic
    def update_payment(dto: PaymentUpdateDTO) -> PaymentResult:
        """
        Edit a payment's amount, method, date or notes.

        The new amount is checked against the invoice amount minus the other
        payments. The invoice status is re-derived from the new total; whether
        a PAID invoice drops back to SENT when the total shrinks is governed by
        BILLING_DOWNGRADE_PAID_ON_PAYMENT_UPDATE.

        Raises:
            PaymentNotFound: no such payment
            ValidationFailed: invalid amount, method or notes
            OverpaymentRejected: the new amount would overpay the invoice
        """
        invoice_id = Payment.objects.filter(pk=dto.payment_id).values_list('invoice_id', flat=True).first()
        if invoice_id is None:
            raise PaymentNotFound(f"Payment {dto.payment_id} not found", payment_id=dto.payment_id)

        invoice = InvoiceService.lock_invoice(invoice_id)
        try:
            payment = Payment.objects.select_for_update().get(pk=dto.payment_id)
        except Payment.DoesNotExist:
            raise PaymentNotFound(f"Payment {dto.payment_id} not found", payment_id=dto.payment_id)

        update_fields = []

        if dto.amount is not None:
            amount = positive_money(dto.amount)
            other_total = invoice.payments.exclude(pk=payment.pk).aggregate(
                total=Sum('amount')
            )['total'] or ZERO
            if other_total + amount > invoice.amount:
                maximum = invoice.remaining_amount(other_total)
                logger.warning(
                    f"Rejected update of payment #{payment.pk} to {amount}: "
                    f"other payments total {other_total} of {invoice.amount}"
                )
                raise OverpaymentRejected(
                    f"Updated payment amount would exceed invoice total. "
                    f"Invoice amount: {format_money(invoice.amount)}, "
                    f"Other payments total: {format_money(other_total)}, "
                    f"Maximum payment amount: {format_money(maximum)}",
                    invoice_amount=invoice.amount,
                    other_payments_total=other_total,
                    maximum_payment=maximum,
                )
            payment.amount = amount
            update_fields.append('amount')

        if dto.method is not None:
            payment.method = _validate_method(dto.method)
            update_fields.append('method')

        if dto.paid_date is not None:
            payment.paid_date = dto.paid_date
            update_fields.append('paid_date')

        if dto.notes is not None:
            payment.notes = _validate_notes(dto.notes)
            update_fields.append('notes')

        if update_fields:
            payment.save(update_fields=update_fields + ['updated_at'])

        total_paid = invoice.total_paid()
        change = after_payment_change(
            invoice.status,
            invoice.is_fully_paid(total_paid),
            downgrade_paid=settings.BILLING_DOWNGRADE_PAID_ON_PAYMENT_UPDATE,
        )
        invoice.save_status_change(change, paid_at=payment.paid_date)

        logger.info(f"Updated payment #{payment.pk} ({', '.join(update_fields) or 'no changes'})")
        return PaymentResult(payment=payment, invoice=invoice, summary=_summarize(invoice))

    @staticmethod
    @transaction.atomic
    def delete_payment(payment_id) -> dict:
        """
        Delete a payment. A PAID invoice no longer fully covered drops back to
        SENT and loses its paid_date.
        """
        invoice_id = Payment.objects.filter(pk=payment_id).values_list('invoice_id', flat=True).first()
        if invoice_id is None:
            raise PaymentNotFound(f"Payment {payment_id} not found", payment_id=payment_id)

        invoice = InvoiceService.lock_invoice(invoice_id)
        deleted, _ = Payment.objects.filter(pk=payment_id).delete()
        if not deleted:
            raise PaymentNotFound(f"Payment {payment_id} not found", payment_id=payment_id)

        remaining_paid = invoice.total_paid()
        change = after_payment_removed(invoice.status, invoice.is_fully_paid(remaining_paid))
        invoice.save_status_change(change)

        logger.info(
            f"Deleted payment #{payment_id} from invoice {invoice.invoice_number} "
            f"({remaining_paid}/{invoice.amount} still paid)"
        )
        return {
            'deleted_payment_id': payment_id,
            'invoice_id': invoice.pk,
            'remaining_paid_amount': remaining_paid,
            'invoice_amount': invoice.amount,
            'invoice_status': invoice.status,
        }

    @staticmethod
    def get_payment(payment_id) -> Payment:
        try:
            return Payment.objects.select_related('invoice').get(pk=payment_id)
        except Payment.DoesNotExist:
            raise PaymentNotFound(f"Payment {payment_id} not found", payment_id=payment_id)

    @staticmethod
    def get_payment_history(invoice_id) -> PaymentHistory:
        """Payments newest first (ties in insertion order) with totals per method."""
        invoice = InvoiceService.get_invoice(invoice_id)
        payments = list(invoice.payments.order_by('-paid_date', 'id'))
        total_paid = sum((p.amount for p in payments), Decimal('0.00'))
        summary = _summarize(invoice, total_paid=total_paid, payment_count=len(payments), by_method=True)
        return PaymentHistory(invoice=invoice, payments=payments, summary=summary)
