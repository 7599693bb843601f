# mp_core/facilities/models.py
from __future__ import annotations

import uuid

from django.db import models

from mp_core.tenants.models import Tenant


class FacilityType(models.TextChoices):
    OFFICE = "OFFICE", "Private Office"
    CLINIC = "CLINIC", "Clinic"
    HOSPITAL = "HOSPITAL", "Hospital"
    TELEHEALTH = "TELEHEALTH", "Telehealth"
    OTHER = "OTHER", "Other"


class Facility(models.Model):
    """
    A place where the doctor sees patients. Scope headers name one of these.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="facilities")

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64)  # unique per tenant

    facility_type = models.CharField(
        max_length=24,
        choices=FacilityType.choices,
        default=FacilityType.OFFICE,
        db_index=True,
    )

    timezone = models.CharField(max_length=64, default="America/Sao_Paulo")

    phone = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    address = models.CharField(max_length=500, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=2, blank=True, default="")
    postal_code = models.CharField(max_length=10, blank=True, default="")

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "facilities_facility"
        constraints = [
            models.UniqueConstraint(fields=["tenant", "code"], name="uq_facility_tenant_code"),
        ]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="facility_tenant_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

    @property
    def full_address(self) -> str:
        locality = " - ".join(p for p in (self.city, self.state) if p)
        return ", ".join(p for p in (self.address, locality, self.postal_code) if p)
