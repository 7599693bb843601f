from django.conf import settings
from django.db import models

from mp_core.common.models import ScopedModel


class AuditEventQuerySet(models.QuerySet):
    def for_scope(self, tenant_id, facility_id):
        return self.filter(tenant_id=tenant_id, facility_id=facility_id)

    def for_entity(self, entity_type: str, entity_id):
        return self.filter(entity_type=entity_type, entity_id=entity_id)


class AuditEvent(ScopedModel):
    """
    Append-only record of a write in the practice.

    event_code is "<module>.<action>" (e.g. "finance.bill.paid"); module is
    stored separately so the timeline can be narrowed to one area.
    """

    module = models.CharField(max_length=32, db_index=True, blank=True, default="")
    event_code = models.CharField(max_length=128, db_index=True)
    entity_type = models.CharField(max_length=128, db_index=True)
    entity_id = models.UUIDField(db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)

    objects = AuditEventQuerySet.as_manager()

    class Meta:
        db_table = "audit_audit_event"
        ordering = ["-occurred_at"]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "occurred_at"], name="audit_scope_time_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.occurred_at:%Y-%m-%d %H:%M}] {self.event_code} {self.entity_type}:{self.entity_id}"
