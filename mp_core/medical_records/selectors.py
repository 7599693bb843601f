from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from mp_core.medical_records.models import MedicalRecord


def record_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[MedicalRecord]:
    return MedicalRecord.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def list_records(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, search: str = "") -> QuerySet[MedicalRecord]:
    qs = record_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")
    if search:
        qs = qs.filter(patient__full_name__icontains=search)
    return qs.order_by("-last_updated")
