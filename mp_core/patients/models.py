# mp_core/patients/models.py
from __future__ import annotations

from datetime import date

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from mp_core.common.models import SoftDeleteModel
from mp_core.common.validators import cep_validator, digits_only, validate_cpf, validate_phone


class Gender(models.TextChoices):
    MALE = "M", "Male"
    FEMALE = "F", "Female"
    OTHER = "O", "Other"


class BloodType(models.TextChoices):
    A_POS = "A+", "A+"
    A_NEG = "A-", "A-"
    B_POS = "B+", "B+"
    B_NEG = "B-", "B-"
    AB_POS = "AB+", "AB+"
    AB_NEG = "AB-", "AB-"
    O_POS = "O+", "O+"
    O_NEG = "O-", "O-"


class Patient(SoftDeleteModel):
    """
    Patient registry entry owned by a doctor within a tenant/facility.
    Loosely structured health history lives in JSON columns.
    """

    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="patients")

    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=1, choices=Gender.choices, blank=True, default="")

    mobile_phone = models.CharField(max_length=20, blank=True, default="", validators=[validate_phone])
    landline = models.CharField(max_length=20, blank=True, default="", validators=[validate_phone])
    email = models.EmailField(blank=True, default="")

    address = models.CharField(max_length=500, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=2, blank=True, default="")
    postal_code = models.CharField(max_length=9, blank=True, default="", validators=[cep_validator])

    cpf = models.CharField(max_length=14, blank=True, default="", validators=[validate_cpf])
    rg = models.CharField(max_length=20, blank=True, default="")

    blood_type = models.CharField(max_length=3, choices=BloodType.choices, blank=True, default="", db_index=True)
    height_cm = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(50), MaxValueValidator(250)],
    )
    weight_kg = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(500)],
    )
    is_smoker = models.BooleanField(default=False)
    is_alcohol_consumer = models.BooleanField(default=False)

    allergies = models.JSONField(default=list, blank=True)
    congenital_diseases = models.JSONField(default=list, blank=True)
    chronic_diseases = models.JSONField(default=list, blank=True)
    medications = models.JSONField(default=list, blank=True)
    surgical_history = models.JSONField(default=list, blank=True)
    family_history = models.JSONField(default=list, blank=True)
    vital_signs = models.JSONField(default=dict, blank=True)
    emergency_contact = models.JSONField(default=dict, blank=True)
    health_insurance = models.JSONField(default=dict, blank=True)

    notes = models.TextField(blank=True, default="")
    last_consultation_date = models.DateTimeField(null=True, blank=True)
    favorite = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = "patients_patient"
        ordering = ["full_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "facility_id", "cpf"],
                condition=Q(deleted_at__isnull=True) & ~Q(cpf=""),
                name="uq_patient_scope_cpf",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "doctor"], name="patient_scope_doctor_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name

    def save(self, *args, **kwargs):
        # digits only; uq_patient_scope_cpf compares the normalized value
        self.cpf = digits_only(self.cpf)
        super().save(*args, **kwargs)

    @property
    def phone(self) -> str:
        return self.mobile_phone or self.landline

    @property
    def age(self) -> int | None:
        if not self.date_of_birth:
            return None
        today = date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))

    def bmi(self) -> float | None:
        if not self.height_cm or not self.weight_kg:
            return None
        height_m = float(self.height_cm) / 100
        return round(float(self.weight_kg) / (height_m * height_m), 2)
