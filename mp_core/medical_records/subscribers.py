from mp_core.common.events import subscribe
from mp_core.medical_records.services import MedicalRecordService


@subscribe("consultation.created")
def on_consultation_created(payload: dict) -> None:
    MedicalRecordService.record_document(event_name="consultation.created", payload=payload)


@subscribe("anamnesis.created")
def on_anamnesis_created(payload: dict) -> None:
    MedicalRecordService.record_document(event_name="anamnesis.created", payload=payload)


@subscribe("exam.created")
def on_exam_created(payload: dict) -> None:
    MedicalRecordService.record_document(event_name="exam.created", payload=payload)


@subscribe("prescription.created")
def on_prescription_created(payload: dict) -> None:
    MedicalRecordService.record_document(event_name="prescription.created", payload=payload)
