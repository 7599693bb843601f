# mp_core/exams/models.py
from django.conf import settings
from django.db import models

from mp_core.common.models import SoftDeleteModel
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient


class ExamType(models.TextChoices):
    LABORATORY = "laboratorial", "Laboratory"
    IMAGING = "imagem", "Imaging"
    FUNCTIONAL = "funcional", "Functional"
    ENDOSCOPIC = "endoscopico", "Endoscopic"
    BIOPSY = "biopsia", "Biopsy"
    OTHER = "outros", "Other"


class ExamStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SCHEDULED = "scheduled", "Scheduled"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class Exam(SoftDeleteModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="exams")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="exams")
    consultation = models.ForeignKey(
        Consultation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="exams",
    )

    exam_name = models.CharField(max_length=255)
    exam_type = models.CharField(max_length=16, choices=ExamType.choices, db_index=True)
    exam_category = models.CharField(max_length=100, blank=True, default="", db_index=True)
    exam_date = models.DateField(db_index=True)

    status = models.CharField(max_length=16, choices=ExamStatus.choices, default=ExamStatus.PENDING, db_index=True)

    request_details = models.JSONField(default=dict, blank=True)
    results = models.JSONField(default=dict, blank=True)
    additional_notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "exams_exam"
        ordering = ["-exam_date", "-created_at"]

    def __str__(self) -> str:
        return f"{self.exam_name} ({self.get_status_display()})"
