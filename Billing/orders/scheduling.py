"""
Recurring order date arithmetic.

Everything here is a pure function of its arguments (plus billing settings);
nothing touches the database, so the rules can be tested in isolation.

Calendar periods use dateutil's relativedelta, which clamps to the last day
of the target month: Jan 31 + 1 month is Feb 28 (Feb 29 in leap years), and
Feb 29 + 1 year is Feb 28.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.conf import settings

from Billing.core.exceptions import ValidationFailed
from Billing.orders.choices import OrderFrequency

MIN_CUSTOM_DAYS = 1
MAX_CUSTOM_DAYS = 365
MAX_LEAD_TIME_DAYS = 30

PERIODS = {
    OrderFrequency.WEEKLY: timedelta(days=7),
    OrderFrequency.BIWEEKLY: timedelta(days=14),
    OrderFrequency.MONTHLY: relativedelta(months=1),
    OrderFrequency.QUARTERLY: relativedelta(months=3),
    OrderFrequency.ANNUALLY: relativedelta(years=1),
}

SCHEDULE_LABELS = {
    OrderFrequency.WEEKLY: 'Weekly',
    OrderFrequency.BIWEEKLY: 'Bi-weekly',
    OrderFrequency.MONTHLY: 'Monthly',
    OrderFrequency.QUARTERLY: 'Quarterly',
    OrderFrequency.ANNUALLY: 'Annual',
    OrderFrequency.CUSTOM: 'Custom',
}

INVOICES_PER_YEAR = {
    OrderFrequency.WEEKLY: 52,
    OrderFrequency.BIWEEKLY: 26,
    OrderFrequency.MONTHLY: 12,
    OrderFrequency.QUARTERLY: 4,
    OrderFrequency.ANNUALLY: 1,
}


@dataclass(frozen=True)
class ScheduledInvoice:
    """One projected invoice date in an order's forward schedule."""
    date: date
    description: str


def validate_frequency(frequency, custom_days=None) -> Tuple[bool, str]:
    """
    Check a frequency / custom day count combination.

    Returns:
        tuple: (is_valid, error_message)
    """
    if frequency not in OrderFrequency.values:
        return False, f"Invalid frequency '{frequency}'. Must be one of: {', '.join(OrderFrequency.values)}"

    if frequency == OrderFrequency.CUSTOM:
        if custom_days is None:
            return False, "Custom days is required for custom frequency"
        if isinstance(custom_days, bool) or not isinstance(custom_days, int):
            return False, "Custom days must be a whole number"
        if not MIN_CUSTOM_DAYS <= custom_days <= MAX_CUSTOM_DAYS:
            return False, f"Custom days must be between {MIN_CUSTOM_DAYS} and {MAX_CUSTOM_DAYS}"
    elif custom_days is not None:
        return False, "Custom days can only be set for custom frequency"

    return True, ""


def validate_lead_time(lead_time_days) -> Tuple[bool, str]:
    if lead_time_days is None:
        return True, ""
    if isinstance(lead_time_days, bool) or not isinstance(lead_time_days, int):
        return False, "Lead time must be a whole number of days"
    if not 0 <= lead_time_days <= MAX_LEAD_TIME_DAYS:
        return False, f"Lead time must be between 0 and {MAX_LEAD_TIME_DAYS} days"
    return True, ""


def calculate_next_invoice_date(current, frequency, custom_days=None):
    """
    Successor of ``current`` under the order's frequency.

    Works on both date and datetime values.
    """
    is_valid, error = validate_frequency(frequency, custom_days)
    if not is_valid:
        raise ValidationFailed({'frequency': error})

    if frequency == OrderFrequency.CUSTOM:
        return current + timedelta(days=custom_days)
    return current + PERIODS[frequency]


def calculate_due_date(issue_date, lead_time_days: Optional[int] = None):
    """Issue date plus the lead time, or plus the default net terms when no lead time is set."""
    if lead_time_days:
        return issue_date + timedelta(days=lead_time_days)
    return issue_date + timedelta(days=settings.BILLING_DEFAULT_NET_TERMS_DAYS)


def clamp_schedule_count(count) -> int:
    """Coerce a requested schedule length into 1..BILLING_SCHEDULE_MAX_COUNT."""
    if count is None or count == '':
        return settings.BILLING_SCHEDULE_DEFAULT_COUNT
    try:
        count = int(count)
    except (TypeError, ValueError):
        return settings.BILLING_SCHEDULE_DEFAULT_COUNT
    return max(1, min(count, settings.BILLING_SCHEDULE_MAX_COUNT))


def format_schedule_date(value) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def generate_invoice_schedule(start, frequency, count, custom_days=None) -> List[ScheduledInvoice]:
    """
    Project ``count`` invoice dates beginning at ``start`` (the order's
    next invoice date), applying the frequency rule between entries.

    The first entry is labelled "Next invoice" rather than "First invoice"
    because the projection starts at the pending date, which may follow
    invoices already generated. Later entries use the capitalised
    frequency label, e.g. "Monthly invoice: Feb 28, 2025".
    """
    label = SCHEDULE_LABELS[frequency]
    schedule = []
    current = start
    for index in range(count):
        prefix = 'Next invoice' if index == 0 else f'{label} invoice'
        schedule.append(ScheduledInvoice(date=current, description=f"{prefix}: {format_schedule_date(current)}"))
        current = calculate_next_invoice_date(current, frequency, custom_days)
    return schedule


def frequency_display(frequency, custom_days=None) -> str:
    if frequency == OrderFrequency.CUSTOM:
        return f"Every {custom_days} day{'' if custom_days == 1 else 's'}"
    if frequency in OrderFrequency.values:
        return OrderFrequency(frequency).label
    return 'Unknown'


def estimated_annual_revenue(amount, frequency, custom_days=None) -> Decimal:
    amount = Decimal(amount)
    if frequency == OrderFrequency.CUSTOM:
        if not custom_days:
            return Decimal('0.00')
        return amount * (365 // custom_days)
    return amount * INVOICES_PER_YEAR.get(frequency, 0)
