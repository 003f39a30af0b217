"""
Invoice Views - API Endpoints

Thin wrappers: validate the request, call InvoiceService, serialize the
result. Billing errors propagate to the project exception handler, which
turns them into the standard error envelope.
"""

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from billing_project.response_formatter import success_response
from Billing.Invoice.serializers import (
    InvoiceCreateSerializer,
    InvoiceSerializer,
    InvoiceStatusSerializer,
    InvoiceUpdateSerializer,
)
from Billing.Invoice.services import InvoiceService


@api_view(['POST'])
def invoice_create(request):
    """
    Create a DRAFT invoice.

    POST /invoices/
    - Request body: InvoiceCreateSerializer fields
    - invoice_number is drawn from the yearly sequence when omitted
    """
    serializer = InvoiceCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    invoice = InvoiceService.create_invoice(serializer.to_dto())
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def invoice_detail(request, pk):
    """
    Retrieve, edit or delete an invoice.

    GET /invoices/{id}/
    PUT/PATCH /invoices/{id}/
    - Only DRAFT invoices can be edited: amount, description, currency, issue_date, due_date
    DELETE /invoices/{id}/
    - Only DRAFT invoices can be deleted; payments go with them
    """
    if request.method == 'GET':
        invoice = InvoiceService.get_invoice(pk)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)

    if request.method in ('PUT', 'PATCH'):
        serializer = InvoiceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = InvoiceService.update_invoice(pk, serializer.to_dto())
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)

    result = InvoiceService.delete_invoice(pk)
    return success_response(data=result, message="Invoice deleted successfully")


@api_view(['PATCH', 'POST'])
def invoice_status(request, pk):
    """
    Manually change an invoice's status.

    PATCH /invoices/{id}/status/
    - Request body: {"status": "SENT" | "PAID" | "OVERDUE" | "CANCELLED"}
    - DRAFT -> SENT stamps sent_date; -> PAID stamps paid_date
    """
    serializer = InvoiceStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    invoice = InvoiceService.update_status(pk, serializer.validated_data['status'])
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)
