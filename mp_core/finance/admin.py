from django.contrib import admin

from mp_core.finance.models import Bill, FinancialTransaction, RecurringTransaction


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "type", "category", "amount", "payment_method", "status")
    list_filter = ("type", "status", "payment_method")
    search_fields = ("description", "category", "patient_name")
    date_hierarchy = "date"


@admin.register(RecurringTransaction)
class RecurringTransactionAdmin(admin.ModelAdmin):
    list_display = ("description", "type", "amount", "frequency", "start_date", "end_date", "is_active")
    list_filter = ("frequency", "type", "is_active")


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("description", "amount", "due_date", "status", "paid_at")
    list_filter = ("status", "category")
    search_fields = ("description", "barcode")
    readonly_fields = ("paid_at",)
