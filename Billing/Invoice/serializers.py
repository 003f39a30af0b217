"""
Invoice Serializers - request validation and response shapes for invoices.
"""

from decimal import Decimal

from rest_framework import serializers

from Billing.core.models import Currency
from Billing.Invoice.dtos import InvoiceCreateDTO, InvoiceUpdateDTO
from Billing.Invoice.models import Invoice


class InvoiceSerializer(serializers.ModelSerializer):
    """Invoice detail, including where its payments stand"""
    client_name = serializers.CharField(source='client.name', read_only=True)
    total_paid = serializers.SerializerMethodField()
    remaining_amount = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'client', 'client_name', 'order',
            'description', 'amount', 'currency', 'status',
            'issue_date', 'due_date', 'sent_date', 'paid_date',
            'total_paid', 'remaining_amount',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def _total_paid(self, obj):
        if not hasattr(obj, '_total_paid_cache'):
            obj._total_paid_cache = obj.total_paid()
        return obj._total_paid_cache

    def get_total_paid(self, obj):
        return f"{self._total_paid(obj):.2f}"

    def get_remaining_amount(self, obj):
        return f"{obj.remaining_amount(self._total_paid(obj)):.2f}"


class InvoiceCreateSerializer(serializers.Serializer):
    """Request body for creating a DRAFT invoice by hand"""
    client_id = serializers.IntegerField()
    order_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    issue_date = serializers.DateTimeField(required=False)
    due_date = serializers.DateTimeField(required=False)
    invoice_number = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate(self, attrs):
        issue_date = attrs.get('issue_date')
        due_date = attrs.get('due_date')
        if issue_date and due_date and due_date < issue_date:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the issue date'})
        return attrs

    def to_dto(self) -> InvoiceCreateDTO:
        data = self.validated_data
        return InvoiceCreateDTO(
            client_id=data['client_id'],
            order_id=data.get('order_id'),
            amount=data['amount'],
            description=data.get('description', ''),
            currency=data.get('currency'),
            issue_date=data.get('issue_date'),
            due_date=data.get('due_date'),
            invoice_number=data.get('invoice_number') or None,
        )


class InvoiceUpdateSerializer(serializers.Serializer):
    """Request body for editing a DRAFT invoice; every field is optional"""
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'), required=False)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    issue_date = serializers.DateTimeField(required=False)
    due_date = serializers.DateTimeField(required=False)

    def to_dto(self) -> InvoiceUpdateDTO:
        return InvoiceUpdateDTO(**self.validated_data)


class InvoiceStatusSerializer(serializers.Serializer):
    """
    Request body for a manual status change. The value is checked against
    the status machine by the service, so unknown statuses get the same
    error whichever way they arrive.
    """
    status = serializers.CharField(max_length=20)
