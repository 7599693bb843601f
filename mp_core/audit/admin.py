from django.contrib import admin

from mp_core.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ("occurred_at", "module", "event_code", "entity_type", "entity_id", "actor_user")
    list_filter = ("module", "entity_type")
    search_fields = ("event_code", "=entity_id", "actor_user__username")
    date_hierarchy = "occurred_at"
    list_select_related = ("actor_user",)

    # the timeline is append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
