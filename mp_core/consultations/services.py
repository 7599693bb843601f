# mp_core/consultations/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common import events
from mp_core.common.services import apply_updates
from mp_core.consultations.models import Consultation, ConsultationType
from mp_core.patients.models import Patient
from mp_core.patients.services import PatientService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "consultation_date",
    "consultation_time",
    "consultation_duration",
    "consultation_type",
    "room_link",
    "status",
    "reason_for_visit",
    "clinical_notes",
    "diagnosis",
    "procedures_performed",
    "referrals",
    "exams_requested",
    "follow_up",
    "additional_notes",
)


def _require_room_link(consultation_type: str, room_link: str) -> None:
    if consultation_type == ConsultationType.ONLINE and not room_link:
        raise ValidationError({"room_link": "A room link is required for online consultations."})


def _owned_patient(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID) -> Patient:
    try:
        return Patient.objects.get(id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id)
    except Patient.DoesNotExist:
        raise ValidationError({"patient_id": "Patient not found in this scope."})


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, consultation_id: UUID) -> Consultation:
    return Consultation.objects.select_for_update().get(
        id=consultation_id,
        tenant_id=tenant_id,
        facility_id=facility_id,
        doctor_id=actor_user_id,
    )


class ConsultationService:
    @staticmethod
    @transaction.atomic
    def create_consultation(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        patient_id: UUID,
        data: dict,
    ) -> Consultation:
        patient = _owned_patient(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, patient_id=patient_id
        )

        when = data["consultation_date"]
        if timezone.localdate(when) < timezone.localdate():
            raise ValidationError({"consultation_date": "Consultation date cannot be in the past."})

        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        _require_room_link(fields.get("consultation_type", ConsultationType.IN_PERSON), fields.get("room_link", ""))

        consultation = Consultation.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient=patient,
            **fields,
        )
        PatientService.touch_last_consultation(patient_id=patient.id, when=consultation.consultation_date)

        AuditService.log(
            event_code="consultation.created",
            entity_type="Consultation",
            entity_id=consultation.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient.id), "consultation_type": consultation.consultation_type},
        )
        events.publish(
            "consultation.created",
            {
                "id": str(consultation.id),
                "patient_id": str(patient.id),
                "doctor_id": actor_user_id,
                "tenant_id": str(tenant_id),
                "facility_id": str(facility_id),
            },
        )
        logger.info("Consultation created id=%s patient=%s", consultation.id, patient.id)
        return consultation

    @staticmethod
    @transaction.atomic
    def update_consultation(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        consultation_id: UUID,
        data: dict,
    ) -> Consultation:
        consultation = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, consultation_id=consultation_id
        )

        changed = apply_updates(consultation, data, EDITABLE_FIELDS)
        _require_room_link(consultation.consultation_type, consultation.room_link)

        if changed:
            consultation.save(update_fields=changed + ["updated_at"])

        AuditService.log(
            event_code="consultation.updated",
            entity_type="Consultation",
            entity_id=consultation.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        logger.info("Consultation updated id=%s fields=%s", consultation.id, sorted(changed))
        return consultation

    @staticmethod
    @transaction.atomic
    def update_status(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        consultation_id: UUID,
        status: str,
        reason: str | None = None,
    ) -> Consultation:
        """
        Sets the status. A given reason replaces additional_notes.
        """
        consultation = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, consultation_id=consultation_id
        )
        previous = consultation.status

        consultation.status = status
        update_fields = ["status", "updated_at"]
        if reason:
            consultation.additional_notes = reason
            update_fields.append("additional_notes")
        consultation.save(update_fields=update_fields)

        AuditService.log(
            event_code="consultation.status_changed",
            entity_type="Consultation",
            entity_id=consultation.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status, "reason": reason or ""},
        )
        logger.info("Consultation %s status %s -> %s", consultation.id, previous, status)
        return consultation

    @staticmethod
    @transaction.atomic
    def delete_consultation(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, consultation_id: UUID) -> None:
        consultation = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, consultation_id=consultation_id
        )
        consultation.soft_delete()

        AuditService.log(
            event_code="consultation.deleted",
            entity_type="Consultation",
            entity_id=consultation.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Consultation soft-deleted id=%s", consultation.id)
