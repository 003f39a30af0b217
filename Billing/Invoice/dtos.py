"""
Data Transfer Objects for the Invoice domain.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class InvoiceCreateDTO:
    """DTO for creating a DRAFT invoice, by hand or from a recurring order"""
    client_id: int
    amount: Decimal
    description: str = ''
    order_id: Optional[int] = None
    currency: Optional[str] = None
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    invoice_number: Optional[str] = None


@dataclass
class InvoiceUpdateDTO:
    """DTO for editing a DRAFT invoice. Fields left as None keep their value."""
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
