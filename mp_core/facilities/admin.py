from django.contrib import admin

from mp_core.facilities.models import Facility


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "tenant", "facility_type", "city", "state", "is_active")
    list_filter = ("facility_type", "is_active", "state")
    search_fields = ("name", "code", "city", "tenant__name")
    list_select_related = ("tenant",)
    readonly_fields = ("id", "full_address", "created_at", "updated_at")
