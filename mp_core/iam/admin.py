# mp_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from mp_core.iam.models import FacilityMembership, Role, UserProfile


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "tenant", "is_active")
    list_filter = ("tenant", "is_active")
    search_fields = ("code", "name")
    ordering = ("tenant", "code")


class FacilityMembershipInline(admin.TabularInline):
    model = FacilityMembership
    extra = 0
    fields = ("tenant", "facility", "role", "is_primary", "is_active")


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "tenant", "crm", "specialty", "whatsapp_enabled", "is_active", "updated_at")
    list_filter = ("tenant", "is_active", "whatsapp_enabled", "specialty")
    search_fields = ("user__username", "user__email", "crm", "clinic_name")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [FacilityMembershipInline]
    ordering = ("-created_at",)


@admin.register(FacilityMembership)
class FacilityMembershipAdmin(admin.ModelAdmin):
    list_display = ("tenant", "facility", "user_profile", "role", "is_primary", "is_active")
    list_filter = ("tenant", "facility", "role", "is_active")
    search_fields = ("facility__name", "facility__code", "user_profile__user__username", "user_profile__user__email")
