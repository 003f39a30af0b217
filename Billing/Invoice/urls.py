"""
Invoice URL Configuration
"""

from django.urls import path

from Billing.Invoice import views
from Billing.payments import views as payment_views

app_name = 'invoices'

urlpatterns = [
    path('', views.invoice_create, name='invoice-create'),
    path('<int:pk>/', views.invoice_detail, name='invoice-detail'),
    path('<int:pk>/status/', views.invoice_status, name='invoice-status'),

    # Payments of one invoice (same handler as /payments/invoice/<id>/)
    path('<int:invoice_pk>/payments/', payment_views.invoice_payments, name='invoice-payments'),
]
