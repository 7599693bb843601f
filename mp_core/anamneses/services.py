# mp_core/anamneses/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mp_core.anamneses.models import Anamnesis
from mp_core.audit.services import AuditService
from mp_core.common import events
from mp_core.common.services import apply_updates
from mp_core.patients.models import Patient

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "anamnesis_date",
    "chief_complaint",
    "illness_history",
    "medical_history",
    "surgical_history",
    "social_history",
    "current_medications",
    "allergies",
    "systems_review",
    "physical_exam",
    "family_history",
    "diagnosis",
    "treatment_plan",
    "additional_notes",
)


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, anamnesis_id: UUID) -> Anamnesis:
    return Anamnesis.objects.select_for_update().get(
        id=anamnesis_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    )


class AnamnesisService:
    @staticmethod
    @transaction.atomic
    def create_anamnesis(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        patient_id: UUID,
        data: dict,
    ) -> Anamnesis:
        if not Patient.objects.filter(
            id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
        ).exists():
            raise ValidationError({"patient_id": "Patient not found in this scope."})

        anamnesis = Anamnesis.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient_id=patient_id,
            **{k: v for k, v in data.items() if k in EDITABLE_FIELDS},
        )

        AuditService.log(
            event_code="anamnesis.created",
            entity_type="Anamnesis",
            entity_id=anamnesis.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient_id)},
        )
        events.publish(
            "anamnesis.created",
            {
                "id": str(anamnesis.id),
                "patient_id": str(patient_id),
                "doctor_id": actor_user_id,
                "tenant_id": str(tenant_id),
                "facility_id": str(facility_id),
            },
        )
        logger.info("Anamnesis created id=%s patient=%s", anamnesis.id, patient_id)
        return anamnesis

    @staticmethod
    @transaction.atomic
    def update_anamnesis(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        anamnesis_id: UUID,
        data: dict,
    ) -> Anamnesis:
        anamnesis = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, anamnesis_id=anamnesis_id
        )
        changed = apply_updates(anamnesis, data, EDITABLE_FIELDS)
        if changed:
            anamnesis.save(update_fields=changed + ["updated_at"])

        AuditService.log(
            event_code="anamnesis.updated",
            entity_type="Anamnesis",
            entity_id=anamnesis.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        logger.info("Anamnesis updated id=%s fields=%s", anamnesis.id, sorted(changed))
        return anamnesis

    @staticmethod
    @transaction.atomic
    def delete_anamnesis(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, anamnesis_id: UUID) -> None:
        anamnesis = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, anamnesis_id=anamnesis_id
        )
        anamnesis.soft_delete()

        AuditService.log(
            event_code="anamnesis.deleted",
            entity_type="Anamnesis",
            entity_id=anamnesis.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Anamnesis soft-deleted id=%s", anamnesis.id)
