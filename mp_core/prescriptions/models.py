# mp_core/prescriptions/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from mp_core.common.models import LiveManager, SoftDeleteModel, SoftDeleteQuerySet
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient

PDF_URL_TEMPLATE = "/storage/prescriptions/{id}.pdf"


class PrescriptionType(models.TextChoices):
    MEDICATION = "medicamento", "Medication"
    EXAM = "exame", "Exam"
    PROCEDURE = "procedimento", "Procedure"
    REST = "repouso", "Rest"
    DIET = "dieta", "Diet"
    OTHER = "outros", "Other"


class PrescriptionStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    EXPIRED = "expired", "Expired"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


class PrescriptionQuerySet(SoftDeleteQuerySet):
    def active(self):
        return self.filter(status=PrescriptionStatus.ACTIVE)

    def expired(self):
        return self.filter(expiration_date__lt=timezone.now())


class Prescription(SoftDeleteModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="prescriptions")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="prescriptions")
    consultation = models.ForeignKey(
        Consultation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="prescriptions",
    )

    title = models.CharField(max_length=255)
    prescription_type = models.CharField(
        max_length=16,
        choices=PrescriptionType.choices,
        default=PrescriptionType.MEDICATION,
        db_index=True,
    )
    issued_at = models.DateTimeField(default=timezone.now, db_index=True)
    expiration_date = models.DateTimeField(null=True, blank=True)

    medications = models.JSONField(default=list, blank=True)
    general_instructions = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=PrescriptionStatus.choices,
        default=PrescriptionStatus.ACTIVE,
        db_index=True,
    )
    pdf_url = models.CharField(max_length=500, blank=True, default="")
    additional_notes = models.TextField(blank=True, default="")

    objects = LiveManager.from_queryset(PrescriptionQuerySet)()

    class Meta:
        db_table = "prescriptions_prescription"
        ordering = ["-issued_at"]
        default_manager_name = "objects"

    def __str__(self) -> str:
        return self.title

    @property
    def is_expired(self) -> bool:
        return bool(self.expiration_date and self.expiration_date < timezone.now())
