from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from mp_core.audit.models import AuditEvent


def audit_timeline(*, tenant_id: UUID, facility_id: UUID) -> QuerySet[AuditEvent]:
    return AuditEvent.objects.for_scope(tenant_id, facility_id).select_related("actor_user").order_by("-occurred_at")


def entity_history(*, tenant_id: UUID, facility_id: UUID, entity_type: str, entity_id: UUID) -> QuerySet[AuditEvent]:
    return audit_timeline(tenant_id=tenant_id, facility_id=facility_id).for_entity(entity_type, entity_id)
