from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Billing.payments'
    label = 'billing_payments'
    verbose_name = 'Payments'
