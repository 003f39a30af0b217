"""
Data Transfer Objects for the payment ledger.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass
class PaymentRecordDTO:
    """DTO for recording a payment against an invoice"""
    invoice_id: int
    amount: Decimal
    method: str
    paid_date: Optional[datetime] = None
    notes: Optional[str] = ''


@dataclass
class PaymentUpdateDTO:
    """DTO for editing a payment. None means 'leave unchanged'."""
    payment_id: int
    amount: Optional[Decimal] = None
    method: Optional[str] = None
    paid_date: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass
class PaymentSummary:
    """Where an invoice stands after a payment event."""
    invoice_amount: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    is_fully_paid: bool
    payment_count: int
    payments_by_method: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class PaymentResult:
    """A recorded or updated payment plus the invoice it now leaves behind."""
    payment: object
    invoice: object
    summary: PaymentSummary


@dataclass
class PaymentHistory:
    invoice: object
    payments: List[object]
    summary: PaymentSummary
