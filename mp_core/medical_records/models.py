# mp_core/medical_records/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from mp_core.common.models import SoftDeleteModel
from mp_core.patients.models import Patient

ID_LIST_FIELDS = ("consultation_ids", "anamnesis_ids", "exam_ids", "prescription_ids")


class MedicalRecord(SoftDeleteModel):
    """
    Per (patient, doctor) aggregate: a snapshot of the patient's health
    data plus the ids of every clinical document written for them.
    """

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="medical_records")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="medical_records")

    patient_info = models.JSONField(default=dict, blank=True)
    health_summary = models.JSONField(default=dict, blank=True)

    consultation_ids = models.JSONField(default=list, blank=True)
    anamnesis_ids = models.JSONField(default=list, blank=True)
    exam_ids = models.JSONField(default=list, blank=True)
    prescription_ids = models.JSONField(default=list, blank=True)

    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "medical_records_record"
        ordering = ["-last_updated"]
        constraints = [
            models.UniqueConstraint(
                fields=["patient", "doctor"],
                condition=Q(deleted_at__isnull=True),
                name="uq_medical_record_patient_doctor",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "doctor"], name="record_scope_doctor_idx"),
        ]

    def __str__(self) -> str:
        return f"MedicalRecord<{self.patient_id}>"

    def _append_id(self, field: str, value) -> bool:
        ids = list(getattr(self, field) or [])
        value = str(value)
        if value in ids:
            return False
        ids.append(value)
        setattr(self, field, ids)
        return True

    def add_consultation_id(self, value) -> bool:
        return self._append_id("consultation_ids", value)

    def add_anamnesis_id(self, value) -> bool:
        return self._append_id("anamnesis_ids", value)

    def add_exam_id(self, value) -> bool:
        return self._append_id("exam_ids", value)

    def add_prescription_id(self, value) -> bool:
        return self._append_id("prescription_ids", value)
