"""
URL configuration for billing_project.

Billing endpoints live under /billing/; see Billing/urls.py for the
per-app routing.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('billing/', include('Billing.urls')),
]
