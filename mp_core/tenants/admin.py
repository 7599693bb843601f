from django.contrib import admin

from mp_core.tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "cnpj", "contact_email", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "code", "cnpj", "contact_email")
    readonly_fields = ("id", "created_at", "updated_at")
    prepopulated_fields = {"code": ("name",)}
