"""
Invoice status machine.

Two kinds of events move an invoice between statuses:

* manual changes requested by a user, restricted to ALLOWED_TRANSITIONS;
* payment events (recorded, updated, deleted), where the status follows
  whether the payments now cover the invoice amount.

Both are pure functions returning a StatusChange; the caller applies it to
the invoice (see Invoice.apply_status_change) inside its own transaction.
"""
from dataclasses import dataclass

from django.db import models

from Billing.core.exceptions import InvalidStatus, InvalidStatusTransition


class InvoiceStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    SENT = 'SENT', 'Sent'
    PAID = 'PAID', 'Paid'
    OVERDUE = 'OVERDUE', 'Overdue'
    CANCELLED = 'CANCELLED', 'Cancelled'


ALLOWED_TRANSITIONS = {
    InvoiceStatus.DRAFT: {InvoiceStatus.SENT, InvoiceStatus.CANCELLED},
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
    InvoiceStatus.PAID: set(),
    InvoiceStatus.CANCELLED: set(),
}


@dataclass(frozen=True)
class StatusChange:
    """
    What applying an event does to an invoice.

    ``mark_sent`` stamps sent_date, ``mark_paid`` stamps paid_date and
    ``clear_paid`` empties it.
    """
    previous: str
    status: str
    mark_sent: bool = False
    mark_paid: bool = False
    clear_paid: bool = False

    @property
    def changed(self):
        return self.previous != self.status


def is_valid_status(value) -> bool:
    return value in InvoiceStatus.values


def can_transition(current, target) -> bool:
    """Whether a user may move an invoice from ``current`` to ``target``."""
    return target in ALLOWED_TRANSITIONS.get(current, set())


def _change(current, target) -> StatusChange:
    return StatusChange(
        previous=current,
        status=target,
        mark_sent=current == InvoiceStatus.DRAFT and target == InvoiceStatus.SENT,
        mark_paid=target == InvoiceStatus.PAID and current != InvoiceStatus.PAID,
        clear_paid=current == InvoiceStatus.PAID and target != InvoiceStatus.PAID,
    )


def manual_transition(current, target) -> StatusChange:
    """
    Validate a user-requested status change.

    Raises:
        InvalidStatus: target is not a known status
        InvalidStatusTransition: the pair is not in ALLOWED_TRANSITIONS
    """
    if not is_valid_status(target):
        raise InvalidStatus(
            f"Invalid status '{target}'. Must be one of: {', '.join(InvoiceStatus.values)}",
            status=target,
        )
    if not can_transition(current, target):
        allowed = sorted(ALLOWED_TRANSITIONS.get(current, set()))
        raise InvalidStatusTransition(
            f"Cannot change invoice status from {current} to {target}. "
            f"Allowed: {', '.join(allowed) if allowed else 'none'}",
            current_status=current,
            requested_status=target,
        )
    return _change(current, target)


def after_payment_change(current, is_fully_paid, downgrade_paid=True) -> StatusChange:
    """
    Status after a payment was recorded or edited.

    A DRAFT invoice receiving money has evidently been sent, so it moves to
    SENT first; a fully covered invoice then becomes PAID. With
    ``downgrade_paid`` a PAID invoice that is no longer covered drops back
    to SENT.
    """
    status = current
    mark_sent = False
    if status == InvoiceStatus.DRAFT:
        status = InvoiceStatus.SENT
        mark_sent = True

    if is_fully_paid:
        if status != InvoiceStatus.PAID:
            return StatusChange(current, InvoiceStatus.PAID, mark_sent=mark_sent, mark_paid=True)
    elif status == InvoiceStatus.PAID and downgrade_paid:
        return StatusChange(current, InvoiceStatus.SENT, clear_paid=True)

    return StatusChange(current, status, mark_sent=mark_sent)


def after_payment_removed(current, is_fully_paid) -> StatusChange:
    """Status after a payment was deleted: PAID falls back to SENT when no longer covered."""
    if current == InvoiceStatus.PAID and not is_fully_paid:
        return StatusChange(current, InvoiceStatus.SENT, clear_paid=True)
    return StatusChange(current, current)
