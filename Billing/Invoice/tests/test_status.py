"""
Tests for the invoice status machine (no database).
"""

from django.test import SimpleTestCase

from Billing.core.exceptions import InvalidStatus, InvalidStatusTransition
from Billing.Invoice.status import (
    ALLOWED_TRANSITIONS,
    InvoiceStatus,
    after_payment_change,
    after_payment_removed,
    can_transition,
    manual_transition,
)

ALL = list(InvoiceStatus.values)


class ManualTransitionTest(SimpleTestCase):
    """Every (current, target) pair against the transition table"""

    def test_allowed_pairs(self):
        """Exactly the listed pairs are allowed"""
        expected = {
            ('DRAFT', 'SENT'), ('DRAFT', 'CANCELLED'),
            ('SENT', 'PAID'), ('SENT', 'OVERDUE'), ('SENT', 'CANCELLED'),
            ('OVERDUE', 'PAID'), ('OVERDUE', 'CANCELLED'),
        }
        for current in ALL:
            for target in ALL:
                with self.subTest(current=current, target=target):
                    self.assertEqual(can_transition(current, target), (current, target) in expected)

    def test_illegal_pairs_raise(self):
        """Every pair outside the table raises InvalidStatusTransition"""
        for current in ALL:
            for target in ALL:
                if target in ALLOWED_TRANSITIONS[current]:
                    continue
                with self.subTest(current=current, target=target):
                    with self.assertRaises(InvalidStatusTransition):
                        manual_transition(current, target)

    def test_terminal_statuses(self):
        """PAID and CANCELLED allow nothing"""
        self.assertEqual(ALLOWED_TRANSITIONS[InvoiceStatus.PAID], set())
        self.assertEqual(ALLOWED_TRANSITIONS[InvoiceStatus.CANCELLED], set())

    def test_unknown_status(self):
        """A value outside the enum is InvalidStatus, not a transition error"""
        with self.assertRaises(InvalidStatus):
            manual_transition('DRAFT', 'ARCHIVED')

    def test_draft_to_sent_marks_sent(self):
        change = manual_transition('DRAFT', 'SENT')
        self.assertTrue(change.mark_sent)
        self.assertFalse(change.mark_paid)

    def test_entering_paid_marks_paid(self):
        for current in ('SENT', 'OVERDUE'):
            with self.subTest(current=current):
                change = manual_transition(current, 'PAID')
                self.assertTrue(change.mark_paid)
                self.assertFalse(change.mark_sent)

    def test_cancel_marks_nothing(self):
        change = manual_transition('SENT', 'CANCELLED')
        self.assertEqual(change.status, 'CANCELLED')
        self.assertFalse(change.mark_sent or change.mark_paid or change.clear_paid)


class PaymentDrivenTransitionTest(SimpleTestCase):
    """Status changes caused by payments being recorded, edited or deleted"""

    def test_partial_payment_on_draft_sends(self):
        change = after_payment_change('DRAFT', is_fully_paid=False)
        self.assertEqual(change.status, 'SENT')
        self.assertTrue(change.mark_sent)
        self.assertFalse(change.mark_paid)

    def test_full_payment_on_draft_sends_and_pays(self):
        change = after_payment_change('DRAFT', is_fully_paid=True)
        self.assertEqual(change.status, 'PAID')
        self.assertTrue(change.mark_sent)
        self.assertTrue(change.mark_paid)

    def test_full_payment_on_overdue_pays(self):
        change = after_payment_change('OVERDUE', is_fully_paid=True)
        self.assertEqual(change.status, 'PAID')
        self.assertFalse(change.mark_sent)

    def test_partial_payment_keeps_status(self):
        for current in ('SENT', 'OVERDUE'):
            with self.subTest(current=current):
                change = after_payment_change(current, is_fully_paid=False)
                self.assertFalse(change.changed)

    def test_update_downgrades_paid(self):
        change = after_payment_change('PAID', is_fully_paid=False)
        self.assertEqual(change.status, 'SENT')
        self.assertTrue(change.clear_paid)

    def test_update_without_downgrade_keeps_paid(self):
        change = after_payment_change('PAID', is_fully_paid=False, downgrade_paid=False)
        self.assertEqual(change.status, 'PAID')
        self.assertFalse(change.clear_paid)

    def test_still_paid_is_unchanged(self):
        change = after_payment_change('PAID', is_fully_paid=True)
        self.assertFalse(change.changed)
        self.assertFalse(change.mark_paid)

    def test_removal_downgrades_paid(self):
        change = after_payment_removed('PAID', is_fully_paid=False)
        self.assertEqual(change.status, 'SENT')
        self.assertTrue(change.clear_paid)

    def test_removal_leaves_other_statuses(self):
        for current in ('SENT', 'OVERDUE', 'CANCELLED'):
            with self.subTest(current=current):
                self.assertFalse(after_payment_removed(current, is_fully_paid=False).changed)
