from django.contrib import admin

from Billing.payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Read-only: payments must go through the ledger to keep invoice totals consistent."""
    list_display = ['id', 'invoice', 'amount', 'method', 'paid_date']
    list_filter = ['method']
    search_fields = ['invoice__invoice_number', 'notes']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
