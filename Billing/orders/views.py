"""
Recurring Order Views - API Endpoints

Thin wrappers around OrderSchedulerService.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from billing_project.response_formatter import success_response
from Billing.Invoice.serializers import InvoiceSerializer
from Billing.orders.serializers import (
    GenerateInvoiceSerializer,
    OrderCreateSerializer,
    OrderScheduleSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    OrderUpdateSerializer,
)
from Billing.orders.services import OrderSchedulerService


@api_view(['POST'])
def order_create(request):
    """
    Create a recurring order.

    POST /orders/
    - custom_days (1-365) is required for CUSTOM frequency and rejected otherwise
    - The first invoice date is one period after start_date
    """
    serializer = OrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    order = OrderSchedulerService.create_order(serializer.to_dto())
    return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def order_detail(request, pk):
    """
    GET /orders/{id}/
    PUT /orders/{id}/
    - Same body as creation; next_invoice_date is recomputed when the
      frequency, custom_days or start_date change
    DELETE /orders/{id}/
    - Orders with invoices are cancelled instead of deleted
    """
    if request.method == 'GET':
        order = OrderSchedulerService.get_order(pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    if request.method == 'PUT':
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderSchedulerService.update_order(pk, serializer.to_dto())
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    result = OrderSchedulerService.delete_order(pk)
    if result.get('cancelled'):
        message = "Order has invoices and was cancelled instead of deleted"
    else:
        message = "Order deleted successfully"
    return success_response(data=result, message=message)


@api_view(['PATCH', 'POST'])
def order_status(request, pk):
    """PATCH /orders/{id}/status/ - {"status": "ACTIVE" | "PAUSED" | "CANCELLED"}"""
    serializer = OrderStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    order = OrderSchedulerService.update_order_status(pk, serializer.validated_data['status'])
    return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


@api_view(['GET'])
def order_schedule(request, pk):
    """
    GET /orders/{id}/schedule/?count=5
    - Projects upcoming invoice dates; count is clamped to 1-20
    """
    schedule = OrderSchedulerService.get_order_schedule(pk, request.query_params.get('count'))
    return Response(OrderScheduleSerializer(schedule).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def order_generate_invoice(request, pk):
    """
    POST /orders/{id}/generate-invoice/
    - Optional body: {"invoice_number": "..."}
    - Creates a DRAFT invoice and advances the order's next invoice date
    """
    serializer = GenerateInvoiceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    invoice = OrderSchedulerService.generate_invoice_from_order(
        pk, invoice_number=serializer.validated_data.get('invoice_number') or None
    )
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def upcoming_orders(request):
    """
    GET /orders/upcoming/?days=7 - ACTIVE orders due within the window
    - days is clamped to 0..BILLING_UPCOMING_MAX_DAYS
    """
    try:
        days = int(request.query_params.get('days', settings.BILLING_UPCOMING_DAYS_AHEAD))
    except ValueError:
        days = settings.BILLING_UPCOMING_DAYS_AHEAD
    orders = OrderSchedulerService.upcoming_orders(days_ahead=days)
    return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)
