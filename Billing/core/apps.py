from django.apps import AppConfig


class BillingCoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Billing.core'
    label = 'billing_core'
    verbose_name = 'Billing Core'
