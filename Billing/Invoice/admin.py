from django.contrib import admin

from Billing.Invoice.models import Invoice, InvoiceNumberSequence


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'client', 'amount', 'currency', 'status', 'issue_date', 'due_date', 'paid_date']
    list_filter = ['status', 'currency']
    search_fields = ['invoice_number', 'client__name', 'description']
    # status and dates are owned by the ledger and the status machine
    readonly_fields = ['status', 'sent_date', 'paid_date', 'created_at', 'updated_at']


@admin.register(InvoiceNumberSequence)
class InvoiceNumberSequenceAdmin(admin.ModelAdmin):
    list_display = ['year', 'last_value']
