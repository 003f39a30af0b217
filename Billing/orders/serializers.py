"""
Recurring Order Serializers
"""

from decimal import Decimal

from rest_framework import serializers

from Billing.orders import scheduling
from Billing.orders.choices import OrderFrequency
from Billing.orders.dtos import OrderCreateDTO, OrderUpdateDTO
from Billing.orders.models import Order


class OrderSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True)
    frequency_text = serializers.CharField(read_only=True)
    estimated_annual_revenue = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'client', 'client_name', 'description', 'amount',
            'frequency', 'custom_days', 'frequency_text', 'lead_time_days',
            'start_date', 'next_invoice_date', 'status',
            'estimated_annual_revenue', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Request body for creating a recurring order"""
    dto_class = OrderCreateDTO

    client_id = serializers.IntegerField()
    description = serializers.CharField(max_length=500)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    frequency = serializers.ChoiceField(choices=OrderFrequency.choices)
    custom_days = serializers.IntegerField(
        required=False,
        allow_null=True,
        min_value=scheduling.MIN_CUSTOM_DAYS,
        max_value=scheduling.MAX_CUSTOM_DAYS,
    )
    lead_time_days = serializers.IntegerField(
        required=False,
        allow_null=True,
        min_value=0,
        max_value=scheduling.MAX_LEAD_TIME_DAYS,
    )
    start_date = serializers.DateField()

    def validate(self, attrs):
        is_valid, error = scheduling.validate_frequency(attrs['frequency'], attrs.get('custom_days'))
        if not is_valid:
            raise serializers.ValidationError({'custom_days': error})
        return attrs

    def to_dto(self):
        data = self.validated_data
        return self.dto_class(
            client_id=data['client_id'],
            description=data['description'],
            amount=data['amount'],
            frequency=data['frequency'],
            start_date=data['start_date'],
            custom_days=data.get('custom_days'),
            lead_time_days=data.get('lead_time_days'),
        )


class OrderUpdateSerializer(OrderCreateSerializer):
    """Request body for updating a recurring order; the same fields as creation"""
    dto_class = OrderUpdateDTO


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)


class GenerateInvoiceSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=50, required=False, allow_blank=True)


class ScheduledInvoiceSerializer(serializers.Serializer):
    date = serializers.DateField()
    description = serializers.CharField()


class OrderScheduleSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    order_status = serializers.CharField()
    frequency = serializers.CharField()
    count = serializers.IntegerField()
    schedule = ScheduledInvoiceSerializer(many=True)
