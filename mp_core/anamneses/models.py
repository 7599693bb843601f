# mp_core/anamneses/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from mp_core.common.models import SoftDeleteModel
from mp_core.patients.models import Patient


class Anamnesis(SoftDeleteModel):
    """
    Structured clinical interview taken for a patient on a given day.
    """

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="anamneses")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="anamneses")

    anamnesis_date = models.DateField(default=timezone.localdate, db_index=True)

    chief_complaint = models.TextField()
    illness_history = models.TextField()

    medical_history = models.JSONField(default=list, blank=True)
    surgical_history = models.JSONField(default=list, blank=True)
    social_history = models.JSONField(default=dict, blank=True)
    current_medications = models.JSONField(default=list, blank=True)
    allergies = models.JSONField(default=list, blank=True)
    systems_review = models.JSONField(default=dict, blank=True)
    physical_exam = models.JSONField(default=dict, blank=True)

    family_history = models.TextField(blank=True, default="")
    diagnosis = models.TextField(blank=True, default="")
    treatment_plan = models.TextField(blank=True, default="")
    additional_notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "anamneses_anamnesis"
        ordering = ["-anamnesis_date", "-created_at"]
        verbose_name_plural = "anamneses"

    def __str__(self) -> str:
        return f"Anamnesis {self.patient_id} {self.anamnesis_date}"
