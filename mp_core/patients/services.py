# mp_core/patients/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.services import apply_updates
from mp_core.patients.models import Patient

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "full_name",
    "date_of_birth",
    "gender",
    "mobile_phone",
    "landline",
    "email",
    "address",
    "city",
    "state",
    "postal_code",
    "cpf",
    "rg",
    "blood_type",
    "height_cm",
    "weight_kg",
    "is_smoker",
    "is_alcohol_consumer",
    "allergies",
    "congenital_diseases",
    "chronic_diseases",
    "medications",
    "surgical_history",
    "family_history",
    "vital_signs",
    "emergency_contact",
    "health_insurance",
    "notes",
    "favorite",
)

CPF_TAKEN_MSG = "A patient with this CPF already exists."


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID) -> Patient:
    return Patient.objects.select_for_update().get(
        id=patient_id,
        tenant_id=tenant_id,
        facility_id=facility_id,
        doctor_id=actor_user_id,
    )


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> Patient:
        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        try:
            with transaction.atomic():
                patient = Patient.objects.create(
                    tenant_id=tenant_id,
                    facility_id=facility_id,
                    doctor_id=actor_user_id,
                    **fields,
                )
        except IntegrityError:
            raise ValidationError({"cpf": CPF_TAKEN_MSG})

        AuditService.log(
            event_code="patient.created",
            entity_type="Patient",
            entity_id=patient.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"full_name": patient.full_name},
        )
        logger.info("Patient created id=%s doctor=%s", patient.id, actor_user_id)
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        patient_id: UUID,
        data: dict,
    ) -> Patient:
        patient = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, patient_id=patient_id)

        changed = apply_updates(patient, data, EDITABLE_FIELDS)
        if changed:
            try:
                with transaction.atomic():
                    patient.save(update_fields=changed + ["updated_at"])
            except IntegrityError:
                raise ValidationError({"cpf": CPF_TAKEN_MSG})

        AuditService.log(
            event_code="patient.updated",
            entity_type="Patient",
            entity_id=patient.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(changed)},
        )
        logger.info("Patient updated id=%s fields=%s", patient.id, sorted(changed))
        return patient

    @staticmethod
    @transaction.atomic
    def delete_patient(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID) -> None:
        patient = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, patient_id=patient_id)
        patient.soft_delete()

        AuditService.log(
            event_code="patient.deleted",
            entity_type="Patient",
            entity_id=patient.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
        )
        logger.info("Patient soft-deleted id=%s", patient.id)

    @staticmethod
    @transaction.atomic
    def toggle_favorite(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID) -> Patient:
        patient = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, patient_id=patient_id)
        patient.favorite = not patient.favorite
        patient.save(update_fields=["favorite", "updated_at"])

        AuditService.log(
            event_code="patient.favorite_toggled",
            entity_type="Patient",
            entity_id=patient.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"favorite": patient.favorite},
        )
        return patient

    @staticmethod
    def touch_last_consultation(*, patient_id: UUID, when) -> None:
        Patient.objects.filter(id=patient_id).update(last_consultation_date=when)
