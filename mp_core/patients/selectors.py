# mp_core/patients/selectors.py
from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from mp_core.common.validators import digits_only
from mp_core.patients.models import Patient

ORDERING_FIELDS = {"full_name", "-full_name", "created_at", "-created_at", "last_consultation_date", "-last_consultation_date"}


def patient_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Patient]:
    return Patient.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_patient(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, patient_id: UUID) -> Patient:
    return patient_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).get(id=patient_id)


def _text_filter(q: str) -> Q:
    cond = Q(full_name__icontains=q) | Q(email__icontains=q) | Q(mobile_phone__icontains=q) | Q(cpf__icontains=q)
    digits = digits_only(q)
    if digits and digits != q:
        cond |= Q(cpf__icontains=digits)
    return cond


def search_patients(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    q: str = "",
    favorite: bool | None = None,
    blood_type: str | None = None,
    ordering: str | None = None,
) -> QuerySet[Patient]:
    qs = patient_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)

    if q:
        qs = qs.filter(_text_filter(q))
    if favorite is not None:
        qs = qs.filter(favorite=favorite)
    if blood_type:
        qs = qs.filter(blood_type=blood_type)

    return qs.order_by(ordering if ordering in ORDERING_FIELDS else "full_name")


def quick_search(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, q: str, limit: int = 10) -> list[dict]:
    qs = patient_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).filter(_text_filter(q))
    return [
        {"id": str(p.id), "full_name": p.full_name, "phone": p.phone, "email": p.email, "age": p.age}
        for p in qs.order_by("full_name")[:limit]
    ]


def patient_stats(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> dict:
    qs = patient_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
    since = timezone.now() - timedelta(days=30)

    blood_types = {
        row["blood_type"]: row["total"]
        for row in qs.exclude(blood_type="").values("blood_type").annotate(total=Count("id")).order_by("blood_type")
    }
    return {
        "total": qs.count(),
        "favorites": qs.filter(favorite=True).count(),
        "recent_consultations": qs.filter(last_consultation_date__gte=since).count(),
        "blood_types": blood_types,
    }


def health_summary(patient: Patient) -> dict:
    return {
        "patient_id": str(patient.id),
        "full_name": patient.full_name,
        "age": patient.age,
        "bmi": patient.bmi(),
        "blood_type": patient.blood_type or None,
        "allergies": patient.allergies,
        "chronic_diseases": patient.chronic_diseases,
        "medications": patient.medications,
        "last_consultation_date": patient.last_consultation_date,
    }
