# mp_core/prescriptions/selectors.py
from __future__ import annotations

from datetime import date
from uuid import UUID

from django.db.models import Q, QuerySet

from mp_core.prescriptions.models import Prescription


def prescription_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Prescription]:
    return Prescription.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_prescription(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, prescription_id: UUID) -> Prescription:
    return (
        prescription_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .select_related("patient")
        .get(id=prescription_id)
    )


def search_prescriptions(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    status: str | None = None,
    prescription_type: str | None = None,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    expired: bool | None = None,
    active: bool | None = None,
    search: str = "",
) -> QuerySet[Prescription]:
    qs = prescription_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")

    if status:
        qs = qs.filter(status=status)
    if prescription_type:
        qs = qs.filter(prescription_type=prescription_type)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(issued_at__date__gte=date_from)
    if date_to:
        qs = qs.filter(issued_at__date__lte=date_to)
    if expired:
        qs = qs.expired()
    if active:
        qs = qs.active()
    if search:
        qs = qs.filter(Q(title__icontains=search) | Q(patient__full_name__icontains=search))

    return qs.order_by("-issued_at")
