"""
Billing App - Main URL Configuration
This file routes URLs to the appropriate sub-apps within the Billing module.
"""
from django.urls import path, include

app_name = 'billing'

urlpatterns = [
    # Invoice URLs (manual creation, status changes, deletion)
    path('invoices/', include('Billing.Invoice.urls')),

    # Payment ledger URLs
    path('payments/', include('Billing.payments.urls')),

    # Recurring order URLs
    path('orders/', include('Billing.orders.urls')),
]
