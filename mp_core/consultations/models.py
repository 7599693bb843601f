# mp_core/consultations/models.py
from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from mp_core.common.models import SoftDeleteModel
from mp_core.patients.models import Patient

MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480
DEFAULT_DURATION_MINUTES = 30


class ConsultationType(models.TextChoices):
    IN_PERSON = "presencial", "In person"
    ONLINE = "online", "Online"
    HOME_VISIT = "domicilio", "Home visit"
    EMERGENCY = "emergencia", "Emergency"


class ConsultationStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    NO_SHOW = "no_show", "No show"


class Consultation(SoftDeleteModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="consultations")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="consultations")

    consultation_date = models.DateTimeField(db_index=True)
    consultation_time = models.TimeField(null=True, blank=True)
    consultation_duration = models.PositiveIntegerField(
        default=DEFAULT_DURATION_MINUTES,
        validators=[MinValueValidator(MIN_DURATION_MINUTES), MaxValueValidator(MAX_DURATION_MINUTES)],
    )
    consultation_type = models.CharField(
        max_length=16,
        choices=ConsultationType.choices,
        default=ConsultationType.IN_PERSON,
        db_index=True,
    )
    room_link = models.URLField(max_length=500, blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=ConsultationStatus.choices,
        default=ConsultationStatus.SCHEDULED,
        db_index=True,
    )

    reason_for_visit = models.TextField(blank=True, default="")
    clinical_notes = models.TextField(blank=True, default="")
    diagnosis = models.TextField(blank=True, default="")

    procedures_performed = models.JSONField(default=list, blank=True)
    referrals = models.JSONField(default=list, blank=True)
    exams_requested = models.JSONField(default=list, blank=True)
    follow_up = models.JSONField(default=list, blank=True)

    additional_notes = models.TextField(blank=True, default="")

    # added by a later migration (prescriptions depend on consultations)
    prescription = models.OneToOneField(
        "prescriptions.Prescription",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="linked_consultation",
    )

    class Meta:
        db_table = "consultations_consultation"
        ordering = ["-consultation_date"]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "doctor", "consultation_date"], name="consult_scope_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.patient_id} @ {self.consultation_date:%Y-%m-%d}"

    @property
    def full_date_time(self) -> str:
        day = timezone.localtime(self.consultation_date) if timezone.is_aware(self.consultation_date) else self.consultation_date
        if self.consultation_time:
            return f"{day:%Y-%m-%d} {self.consultation_time:%H:%M}"
        return f"{day:%Y-%m-%d %H:%M}"
