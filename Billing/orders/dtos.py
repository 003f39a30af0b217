"""
Data Transfer Objects for recurring orders.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class OrderCreateDTO:
    """DTO for creating a recurring order"""
    client_id: int
    description: str
    amount: Decimal
    frequency: str
    start_date: date
    custom_days: Optional[int] = None
    lead_time_days: Optional[int] = None


@dataclass
class OrderUpdateDTO(OrderCreateDTO):
    """DTO for replacing a recurring order's terms. Every field is restated."""
