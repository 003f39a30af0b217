"""
Money helpers shared by the ledger and the scheduler.

Amounts are always Decimal with two places; floats never reach the database.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from Billing.core.exceptions import ValidationFailed

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value, field='amount') -> Decimal:
    """Coerce ``value`` to a 2-place Decimal, raising ValidationFailed on junk."""
    if isinstance(value, bool) or value is None:
        raise ValidationFailed({field: 'A valid amount is required.'})
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationFailed({field: f'"{value}" is not a valid amount.'})
    if not amount.is_finite():
        raise ValidationFailed({field: f'"{value}" is not a valid amount.'})
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def positive_money(value, field='amount') -> Decimal:
    amount = to_money(value, field)
    if amount <= ZERO:
        raise ValidationFailed({field: 'Amount must be greater than zero.'})
    return amount


def format_money(amount) -> str:
    """Render an amount the way it appears in user-facing messages: $1234.50"""
    return f"${Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP):.2f}"
