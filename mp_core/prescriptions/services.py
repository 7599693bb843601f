# mp_core/prescriptions/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common import events
from mp_core.common.services import apply_updates
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient
from mp_core.prescriptions.models import PDF_URL_TEMPLATE, Prescription

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "consultation_id",
    "title",
    "prescription_type",
    "issued_at",
    "expiration_date",
    "medications",
    "general_instructions",
    "status",
    "additional_notes",
)


def _check_dates(issued_at, expiration_date) -> None:
    if issued_at and issued_at > timezone.now():
        raise ValidationError({"issued_at": "Issue date cannot be in the future."})
    if expiration_date and issued_at and expiration_date <= issued_at:
        raise ValidationError({"expiration_date": "Expiration must be after the issue date."})


def _owned_consultation(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, consultation_id) -> Consultation | None:
    if consultation_id is None:
        return None
    try:
        return Consultation.objects.select_for_update().get(
            id=consultation_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
        )
    except Consultation.DoesNotExist:
        raise ValidationError({"consultation_id": "Consultation not found in this scope."})


def _link(prescription: Prescription, consultation: Consultation | None) -> None:
    """
    Keeps Consultation.prescription pointing at the prescription written for it.
    A consultation holds one prescription: linking a new one detaches the old.
    """
    Consultation.all_objects.filter(prescription=prescription).exclude(
        id=getattr(consultation, "id", None)
    ).update(prescription=None)
    if consultation is None:
        return
    Prescription.all_objects.filter(consultation=consultation).exclude(id=prescription.id).update(
        consultation=None, updated_at=timezone.now()
    )
    if consultation.prescription_id != prescription.id:
        consultation.prescription = prescription
        consultation.save(update_fields=["prescription", "updated_at"])


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, prescription_id: UUID) -> Prescription:
    return Prescription.objects.select_for_update().get(
        id=prescription_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    )


class PrescriptionService:
    @staticmethod
    @transaction.atomic
    def create_prescription(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        patient_id: UUID,
        data: dict,
    ) -> Prescription:
        if not Patient.objects.filter(
            id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
        ).exists():
            raise ValidationError({"patient_id": "Patient not found in this scope."})

        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        fields.setdefault("issued_at", timezone.now())
        _check_dates(fields["issued_at"], fields.get("expiration_date"))

        consultation = _owned_consultation(
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            consultation_id=fields.get("consultation_id"),
        )

        prescription = Prescription.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient_id=patient_id,
            **fields,
        )
        if consultation is not None:
            _link(prescription, consultation)

        AuditService.log(
            event_code="prescription.created",
            entity_type="Prescription",
            entity_id=prescription.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient_id), "consultation_id": str(consultation.id) if consultation else None},
        )
        events.publish(
            "prescription.created",
            {
                "id": str(prescription.id),
                "patient_id": str(patient_id),
                "doctor_id": actor_user_id,
                "tenant_id": str(tenant_id),
                "facility_id": str(facility_id),
            },
        )
        logger.info("Prescription created id=%s patient=%s", prescription.id, patient_id)
        return prescription

    @staticmethod
    @transaction.atomic
    def update_prescription(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        prescription_id: UUID,
        data: dict,
    ) -> Prescription:
        prescription = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, prescription_id=prescription_id
        )

        relink = "consultation_id" in data
        consultation = None
        if relink:
            consultation = _owned_consultation(
                tenant_id=tenant_id,
                facility_id=facility_id,
                actor_user_id=actor_user_id,
                consultation_id=data["consultation_id"],
            )

        changed = apply_updates(prescription, data, EDITABLE_FIELDS)
        _check_dates(prescription.issued_at, prescription.expiration_date)
        if changed:
            prescription.save(update_fields=changed + ["updated_at"])
        if relink:
            _link(prescription, consultation)

        AuditService.log(
            event_code="prescription.updated",
            entity_type="Prescription",
            entity_id=prescription.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        logger.info("Prescription updated id=%s fields=%s", prescription.id, sorted(changed))
        return prescription

    @staticmethod
    @transaction.atomic
    def generate_pdf(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, prescription_id: UUID) -> Prescription:
        """
        Assigns the storage path of the rendered document.
        """
        prescription = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, prescription_id=prescription_id
        )
        prescription.pdf_url = PDF_URL_TEMPLATE.format(id=prescription.id)
        prescription.save(update_fields=["pdf_url", "updated_at"])

        AuditService.log(
            event_code="prescription.pdf_generated",
            entity_type="Prescription",
            entity_id=prescription.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"pdf_url": prescription.pdf_url},
        )
        return prescription

    @staticmethod
    @transaction.atomic
    def delete_prescription(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, prescription_id: UUID) -> None:
        prescription = _locked(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, prescription_id=prescription_id
        )
        prescription.soft_delete()
        Consultation.all_objects.filter(prescription=prescription).update(prescription=None)

        AuditService.log(
            event_code="prescription.deleted",
            entity_type="Prescription",
            entity_id=prescription.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Prescription soft-deleted id=%s", prescription.id)
