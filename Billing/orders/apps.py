from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Billing.orders'
    label = 'billing_orders'
    verbose_name = 'Recurring Orders'
