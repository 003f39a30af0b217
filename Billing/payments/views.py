"""
Payment Views - API Endpoints

These views are THIN WRAPPERS that handle:
1. HTTP request/response
2. Request validation through serializers
3. Routing

The ledger rules live in PaymentLedgerService; its errors are turned into
responses by the project exception handler.
"""

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from billing_project.response_formatter import success_response
from Billing.payments.serializers import (
    PaymentDeletedSerializer,
    PaymentHistorySerializer,
    PaymentRecordSerializer,
    PaymentResultSerializer,
    PaymentSerializer,
    PaymentUpdateSerializer,
)
from Billing.payments.services import PaymentLedgerService


@api_view(['GET', 'POST'])
def invoice_payments(request, invoice_pk):
    """
    Payment history of an invoice, or record a new payment against it.

    GET /payments/invoice/{invoice_id}/
    - Payments newest first, with totals and per-method breakdown

    POST /payments/invoice/{invoice_id}/
    - Request body: {"amount", "method", "paid_date"?, "notes"?}
    - Rejected with 400 when the invoice total would be exceeded
    """
    if request.method == 'GET':
        history = PaymentLedgerService.get_payment_history(invoice_pk)
        return Response(PaymentHistorySerializer(history).data, status=status.HTTP_200_OK)

    serializer = PaymentRecordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = PaymentLedgerService.record_payment(serializer.to_dto(invoice_pk))
    return Response(PaymentResultSerializer(result).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def payment_detail(request, pk):
    """
    Retrieve, edit or delete a payment.

    GET /payments/{id}/
    PUT/PATCH /payments/{id}/
    - Any of amount, method, paid_date, notes
    DELETE /payments/{id}/
    - A PAID invoice left short falls back to SENT
    """
    if request.method == 'GET':
        payment = PaymentLedgerService.get_payment(pk)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_200_OK)

    if request.method in ('PUT', 'PATCH'):
        serializer = PaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = PaymentLedgerService.update_payment(serializer.to_dto(pk))
        return Response(PaymentResultSerializer(result).data, status=status.HTTP_200_OK)

    result = PaymentLedgerService.delete_payment(pk)
    return success_response(
        data=PaymentDeletedSerializer(result).data,
        message="Payment deleted successfully",
    )
