"""
Payment URL Configuration
"""

from django.urls import path

from Billing.payments import views

app_name = 'payments'

urlpatterns = [
    path('invoice/<int:invoice_pk>/', views.invoice_payments, name='invoice-payments'),
    path('<int:pk>/', views.payment_detail, name='payment-detail'),
]
