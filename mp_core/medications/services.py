# mp_core/medications/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.services import apply_updates
from mp_core.medications.models import Medication

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "medication_name",
    "active_ingredient",
    "dosage",
    "form",
    "route",
    "frequency",
    "duration",
    "instructions",
    "side_effects",
    "contraindications",
    "interactions",
    "is_controlled",
    "controlled_type",
)


def _check_controlled(is_controlled: bool, controlled_type: str) -> None:
    if is_controlled and not controlled_type:
        raise ValidationError({"controlled_type": "Controlled medications need a controlled_type."})


class MedicationService:
    @staticmethod
    @transaction.atomic
    def create_medication(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int | None, data: dict) -> Medication:
        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        _check_controlled(fields.get("is_controlled", False), fields.get("controlled_type", ""))

        medication = Medication.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            created_by_id=actor_user_id,
            **fields,
        )
        AuditService.log(
            event_code="medication.created",
            entity_type="Medication",
            entity_id=medication.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"medication_name": medication.medication_name},
        )
        logger.info("Medication created id=%s name=%s", medication.id, medication.medication_name)
        return medication

    @staticmethod
    @transaction.atomic
    def update_medication(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int | None,
        medication_id: UUID,
        data: dict,
    ) -> Medication:
        medication = Medication.objects.select_for_update().get(
            id=medication_id, tenant_id=tenant_id, facility_id=facility_id
        )
        changed = apply_updates(medication, data, EDITABLE_FIELDS)
        _check_controlled(medication.is_controlled, medication.controlled_type)
        if changed:
            medication.save(update_fields=changed + ["updated_at"])

        AuditService.log(
            event_code="medication.updated",
            entity_type="Medication",
            entity_id=medication.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        return medication

    @staticmethod
    @transaction.atomic
    def delete_medication(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int | None, medication_id: UUID) -> None:
        medication = Medication.objects.select_for_update().get(
            id=medication_id, tenant_id=tenant_id, facility_id=facility_id
        )
        medication.soft_delete()
        AuditService.log(
            event_code="medication.deleted",
            entity_type="Medication",
            entity_id=medication.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Medication soft-deleted id=%s", medication.id)
