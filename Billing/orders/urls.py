"""
Recurring Order URL Configuration
"""

from django.urls import path

from Billing.orders import views

app_name = 'orders'

urlpatterns = [
    path('', views.order_create, name='order-create'),
    path('upcoming/', views.upcoming_orders, name='order-upcoming'),
    path('<int:pk>/', views.order_detail, name='order-detail'),
    path('<int:pk>/status/', views.order_status, name='order-status'),
    path('<int:pk>/schedule/', views.order_schedule, name='order-schedule'),
    path('<int:pk>/generate-invoice/', views.order_generate_invoice, name='order-generate-invoice'),
]
