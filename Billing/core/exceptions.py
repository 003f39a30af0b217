"""
Billing domain exceptions.

Every error the billing services raise derives from BillingError, which
carries the HTTP status and machine-readable code the API layer reports.
The response formatter turns these into the standard error envelope.

    BillingError
    ├── NotFoundError (404)
    │   ├── ClientNotFound
    │   ├── InvoiceNotFound
    │   ├── PaymentNotFound
    │   └── OrderNotFound
    ├── InvariantViolation (400)
    │   ├── OverpaymentRejected
    │   ├── InvalidStatus
    │   ├── InvalidStatusTransition
    │   ├── InvoiceDeleteNotAllowed
    │   ├── InvoiceUpdateNotAllowed
    │   ├── OrderNotActive
    │   └── InvoiceNumberExists
    └── ValidationFailed (400)
"""
from rest_framework import status as http_status


class BillingError(Exception):
    """Base class for billing errors."""
    status_code = http_status.HTTP_400_BAD_REQUEST
    error_code = 'BILLING_ERROR'
    default_message = 'Billing operation failed'

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_data(self):
        """Payload placed under ``data`` in the error envelope."""
        data = {'error': self.error_code}
        data.update({key: str(value) for key, value in self.context.items()})
        return data


# ==================== NOT FOUND ====================

class NotFoundError(BillingError):
    status_code = http_status.HTTP_404_NOT_FOUND
    error_code = 'NOT_FOUND'
    default_message = 'Not found'


class ClientNotFound(NotFoundError):
    error_code = 'CLIENT_NOT_FOUND'
    default_message = 'Client not found'


class InvoiceNotFound(NotFoundError):
    error_code = 'INVOICE_NOT_FOUND'
    default_message = 'Invoice not found'


class PaymentNotFound(NotFoundError):
    error_code = 'PAYMENT_NOT_FOUND'
    default_message = 'Payment not found'


class OrderNotFound(NotFoundError):
    error_code = 'ORDER_NOT_FOUND'
    default_message = 'Order not found'


# ==================== INVARIANT VIOLATIONS ====================

class InvariantViolation(BillingError):
    error_code = 'INVARIANT_VIOLATION'


class OverpaymentRejected(InvariantViolation):
    error_code = 'OVERPAYMENT_REJECTED'
    default_message = 'Payment amount would exceed invoice total'


class InvalidStatus(InvariantViolation):
    error_code = 'INVALID_STATUS'
    default_message = 'Invalid status'


class InvalidStatusTransition(InvariantViolation):
    error_code = 'INVALID_STATUS_TRANSITION'
    default_message = 'Invalid status transition'


class InvoiceDeleteNotAllowed(InvariantViolation):
    error_code = 'INVOICE_DELETE_NOT_ALLOWED'
    default_message = 'Only draft invoices can be deleted. Cancel sent invoices instead.'


class InvoiceUpdateNotAllowed(InvariantViolation):
    error_code = 'INVOICE_UPDATE_NOT_ALLOWED'
    default_message = 'Only draft invoices can be updated'


class OrderNotActive(InvariantViolation):
    error_code = 'ORDER_NOT_ACTIVE'
    default_message = 'Order is not active'


class InvoiceNumberExists(InvariantViolation):
    error_code = 'INVOICE_NUMBER_EXISTS'
    default_message = 'Invoice number already exists'


# ==================== INPUT VALIDATION ====================

class ValidationFailed(BillingError):
    """
    Raised by services when input that should have been caught at the edge
    still reaches them. ``errors`` maps field names to messages.
    """
    error_code = 'VALIDATION_FAILED'
    default_message = 'Validation failed'

    def __init__(self, errors=None, message=None):
        self.errors = errors or {}
        if message is None and self.errors:
            message = '; '.join(f"{field}: {error}" for field, error in self.errors.items())
        super().__init__(message)

    def as_data(self):
        data = super().as_data()
        data['errors'] = {field: str(error) for field, error in self.errors.items()}
        return data
