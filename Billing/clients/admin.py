from django.contrib import admin

from Billing.clients.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'company', 'email', 'phone', 'created_at']
    search_fields = ['name', 'company', 'email']
