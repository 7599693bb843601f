# mp_core/medical_records/services.py
from __future__ import annotations

import json
import logging
from uuid import UUID

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from mp_core.medical_records.models import MedicalRecord
from mp_core.patients.models import Patient
from mp_core.patients.selectors import get_patient, health_summary

logger = logging.getLogger(__name__)

# event name -> MedicalRecord method
EVENT_APPENDERS = {
    "consultation.created": "add_consultation_id",
    "anamnesis.created": "add_anamnesis_id",
    "exam.created": "add_exam_id",
    "prescription.created": "add_prescription_id",
}


def _json_safe(data: dict) -> dict:
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def _patient_info(patient: Patient) -> dict:
    return _json_safe(
        {
            "full_name": patient.full_name,
            "date_of_birth": patient.date_of_birth,
            "gender": patient.gender,
            "phone": patient.phone,
            "email": patient.email,
            "cpf": patient.cpf,
            "city": patient.city,
            "state": patient.state,
            "health_insurance": patient.health_insurance,
            "emergency_contact": patient.emergency_contact,
        }
    )


def _snapshot(record: MedicalRecord, patient: Patient) -> None:
    record.patient_info = _patient_info(patient)
    record.health_summary = _json_safe(health_summary(patient))


class MedicalRecordService:
    @staticmethod
    @transaction.atomic
    def get_or_create_for_patient(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        patient_id: UUID,
    ) -> MedicalRecord:
        patient = get_patient(
            tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id, patient_id=patient_id
        )

        record = (
            MedicalRecord.objects.select_for_update()
            .filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id, patient=patient)
            .first()
        )
        if record is not None:
            return record

        record = MedicalRecord(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient=patient,
        )
        _snapshot(record, patient)
        record.save()
        logger.info("Medical record created id=%s patient=%s", record.id, patient.id)
        return record

    @staticmethod
    @transaction.atomic
    def refresh_snapshot(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID) -> MedicalRecord:
        record = MedicalRecordService.get_or_create_for_patient(
            tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, patient_id=patient_id
        )
        _snapshot(record, record.patient)
        record.save(update_fields=["patient_info", "health_summary", "last_updated", "updated_at"])
        logger.info("Medical record refreshed id=%s", record.id)
        return record

    @staticmethod
    @transaction.atomic
    def record_document(*, event_name: str, payload: dict) -> MedicalRecord:
        """
        Append a newly created clinical document id to the patient's record.
        """
        record = MedicalRecordService.get_or_create_for_patient(
            tenant_id=UUID(payload["tenant_id"]),
            facility_id=UUID(payload["facility_id"]),
            actor_user_id=payload["doctor_id"],
            patient_id=UUID(payload["patient_id"]),
        )

        appender = getattr(record, EVENT_APPENDERS[event_name])
        if appender(payload["id"]):
            record.save()
            logger.info("Medical record %s: %s id=%s", record.id, event_name, payload["id"])
        return record
