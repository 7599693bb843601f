# mp_core/exams/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common import events
from mp_core.common.services import apply_updates
from mp_core.consultations.models import Consultation
from mp_core.exams.models import Exam
from mp_core.patients.models import Patient

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "consultation_id",
    "exam_name",
    "exam_type",
    "exam_category",
    "exam_date",
    "status",
    "request_details",
    "results",
    "additional_notes",
)


def _check_consultation(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID, consultation_id) -> None:
    if consultation_id is None:
        return
    if not Consultation.objects.filter(
        id=consultation_id,
        tenant_id=tenant_id,
        facility_id=facility_id,
        doctor_id=actor_user_id,
        patient_id=patient_id,
    ).exists():
        raise ValidationError({"consultation_id": "Consultation not found for this patient."})


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, exam_id: UUID) -> Exam:
    return Exam.objects.select_for_update().get(
        id=exam_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    )


class ExamService:
    @staticmethod
    @transaction.atomic
    def create_exam(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID, data: dict) -> Exam:
        if not Patient.objects.filter(
            id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
        ).exists():
            raise ValidationError({"patient_id": "Patient not found in this scope."})

        _check_consultation(
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            patient_id=patient_id,
            consultation_id=data.get("consultation_id"),
        )

        exam = Exam.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient_id=patient_id,
            **{k: v for k, v in data.items() if k in EDITABLE_FIELDS},
        )

        AuditService.log(
            event_code="exam.created",
            entity_type="Exam",
            entity_id=exam.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient_id), "exam_type": exam.exam_type},
        )
        events.publish(
            "exam.created",
            {
                "id": str(exam.id),
                "patient_id": str(patient_id),
                "doctor_id": actor_user_id,
                "tenant_id": str(tenant_id),
                "facility_id": str(facility_id),
            },
        )
        logger.info("Exam created id=%s patient=%s", exam.id, patient_id)
        return exam

    @staticmethod
    @transaction.atomic
    def update_exam(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, exam_id: UUID, data: dict) -> Exam:
        exam = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, exam_id=exam_id)

        if "consultation_id" in data:
            _check_consultation(
                tenant_id=tenant_id,
                facility_id=facility_id,
                actor_user_id=actor_user_id,
                patient_id=exam.patient_id,
                consultation_id=data["consultation_id"],
            )

        changed = apply_updates(exam, data, EDITABLE_FIELDS)
        if changed:
            exam.save(update_fields=changed + ["updated_at"])

        AuditService.log(
            event_code="exam.updated",
            entity_type="Exam",
            entity_id=exam.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        logger.info("Exam updated id=%s fields=%s", exam.id, sorted(changed))
        return exam

    @staticmethod
    @transaction.atomic
    def update_status(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        exam_id: UUID,
        status: str,
        results: dict | None = None,
        additional_notes: str | None = None,
    ) -> Exam:
        exam = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, exam_id=exam_id)
        previous = exam.status

        exam.status = status
        update_fields = ["status", "updated_at"]
        if results is not None:
            exam.results = results
            update_fields.append("results")
        if additional_notes is not None:
            exam.additional_notes = additional_notes
            update_fields.append("additional_notes")
        exam.save(update_fields=update_fields)

        AuditService.log(
            event_code="exam.status_changed",
            entity_type="Exam",
            entity_id=exam.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status},
        )
        logger.info("Exam %s status %s -> %s", exam.id, previous, status)
        return exam

    @staticmethod
    @transaction.atomic
    def delete_exam(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, exam_id: UUID) -> None:
        exam = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, exam_id=exam_id)
        exam.soft_delete()

        AuditService.log(
            event_code="exam.deleted",
            entity_type="Exam",
            entity_id=exam.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Exam soft-deleted id=%s", exam.id)
