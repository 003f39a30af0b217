"""
Payment Serializers - API layer for the payment ledger.

These serializers handle:
1. Request validation (the ledger re-checks amounts itself)
2. Converting request bodies to DTOs
3. Response formatting for payments, summaries and history
"""

from decimal import Decimal

from rest_framework import serializers

from Billing.payments.dtos import PaymentRecordDTO, PaymentUpdateDTO
from Billing.payments.models import Payment, PaymentMethod


# ==================== RESPONSE SERIALIZERS ====================


class PaymentSerializer(serializers.ModelSerializer):
    method_display = serializers.CharField(source='get_method_display', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'invoice', 'amount', 'method', 'method_display',
            'paid_date', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentSummarySerializer(serializers.Serializer):
    """Serializes a PaymentSummary dataclass"""
    invoice_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    is_fully_paid = serializers.BooleanField()
    payment_count = serializers.IntegerField()


class PaymentHistorySummarySerializer(PaymentSummarySerializer):
    payments_by_method = serializers.DictField(
        child=serializers.DecimalField(max_digits=14, decimal_places=2)
    )


class InvoiceStateSerializer(serializers.Serializer):
    """The invoice fields a payment event can change"""
    id = serializers.IntegerField()
    invoice_number = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    status = serializers.CharField()
    sent_date = serializers.DateTimeField(allow_null=True)
    paid_date = serializers.DateTimeField(allow_null=True)


class PaymentResultSerializer(serializers.Serializer):
    """Serializes a PaymentResult dataclass"""
    payment = PaymentSerializer()
    invoice = InvoiceStateSerializer()
    summary = PaymentSummarySerializer()


class PaymentHistorySerializer(serializers.Serializer):
    """Serializes a PaymentHistory dataclass"""
    invoice = InvoiceStateSerializer()
    payments = PaymentSerializer(many=True)
    summary = PaymentHistorySummarySerializer()


class PaymentDeletedSerializer(serializers.Serializer):
    deleted_payment_id = serializers.IntegerField()
    invoice_id = serializers.IntegerField()
    remaining_paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoice_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    invoice_status = serializers.CharField()


# ==================== REQUEST SERIALIZERS ====================


class PaymentRecordSerializer(serializers.Serializer):
    """Request body for recording a payment"""
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    paid_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(
        max_length=Payment.NOTES_MAX_LENGTH, required=False, allow_blank=True, default=''
    )

    def to_dto(self, invoice_id) -> PaymentRecordDTO:
        data = self.validated_data
        return PaymentRecordDTO(
            invoice_id=invoice_id,
            amount=data['amount'],
            method=data['method'],
            paid_date=data.get('paid_date'),
            notes=data.get('notes', ''),
        )


class PaymentUpdateSerializer(serializers.Serializer):
    """Request body for editing a payment; every field is optional"""
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    paid_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(max_length=Payment.NOTES_MAX_LENGTH, required=False, allow_blank=True)

    def to_dto(self, payment_id) -> PaymentUpdateDTO:
        data = self.validated_data
        return PaymentUpdateDTO(
            payment_id=payment_id,
            amount=data.get('amount'),
            method=data.get('method'),
            paid_date=data.get('paid_date'),
            notes=data.get('notes'),
        )
