from django.apps import AppConfig


class InvoiceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Billing.Invoice'
    label = 'billing_invoice'
    verbose_name = 'Invoices'
