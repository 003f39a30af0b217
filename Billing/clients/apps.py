from django.apps import AppConfig


class ClientsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'Billing.clients'
    label = 'billing_clients'
    verbose_name = 'Clients'
