import django_filters

from mp_core.audit.models import AuditEvent


class AuditEventFilter(django_filters.FilterSet):
    module = django_filters.CharFilter()
    entity_type = django_filters.CharFilter()
    entity_id = django_filters.UUIDFilter()
    event_code = django_filters.CharFilter()
    event_prefix = django_filters.CharFilter(field_name="event_code", lookup_expr="startswith")
    actor_user_id = django_filters.NumberFilter()
    occurred_after = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")
    occurred_before = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="lte")

    class Meta:
        model = AuditEvent
        fields = ["module", "entity_type", "entity_id", "event_code", "actor_user_id"]
