from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

from django.core.serializers.json import DjangoJSONEncoder

from mp_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


def module_of(event_code: str) -> str:
    return event_code.split(".", 1)[0] if "." in event_code else ""


class AuditService:
    """
    Writes the practice timeline. Services call log() inside their own
    transaction, so an aborted write leaves no event behind.
    """

    @staticmethod
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: UUID,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int | None,
        metadata: dict[str, Any] | None = None,
    ) -> AuditEvent:
        # Decimal, date and UUID values are stored as strings
        payload = json.loads(json.dumps(metadata or {}, cls=DjangoJSONEncoder))

        event = AuditEvent.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            module=module_of(event_code),
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata=payload,
        )
        logger.debug("audit %s %s=%s by user=%s", event_code, entity_type, entity_id, actor_user_id)
        return event
