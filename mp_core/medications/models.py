# mp_core/medications/models.py
from django.conf import settings
from django.db import models

from mp_core.common.models import SoftDeleteModel


class Medication(SoftDeleteModel):
    """
    Facility catalogue entry used when writing prescriptions.
    """

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="catalogued_medications",
    )

    medication_name = models.CharField(max_length=255, db_index=True)
    active_ingredient = models.CharField(max_length=255, blank=True, default="")
    dosage = models.CharField(max_length=100, blank=True, default="")
    form = models.CharField(max_length=50, blank=True, default="", db_index=True)  # tablet, syrup, ...
    route = models.CharField(max_length=50, blank=True, default="", db_index=True)  # oral, IV, ...
    frequency = models.CharField(max_length=100, blank=True, default="")
    duration = models.CharField(max_length=100, blank=True, default="")
    instructions = models.TextField(blank=True, default="")

    side_effects = models.JSONField(default=list, blank=True)
    contraindications = models.JSONField(default=list, blank=True)
    interactions = models.JSONField(default=list, blank=True)

    is_controlled = models.BooleanField(default=False, db_index=True)
    controlled_type = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        db_table = "medications_medication"
        ordering = ["medication_name"]

    def __str__(self) -> str:
        return f"{self.medication_name} {self.dosage}".strip()
