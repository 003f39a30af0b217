from django.contrib import admin

from Billing.orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'client', 'description', 'amount', 'frequency', 'custom_days', 'next_invoice_date', 'status']
    list_filter = ['status', 'frequency']
    search_fields = ['description', 'client__name']
    readonly_fields = ['next_invoice_date', 'created_at', 'updated_at']
