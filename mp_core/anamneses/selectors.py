# mp_core/anamneses/selectors.py
from __future__ import annotations

from collections import Counter
from datetime import date
from uuid import UUID

from django.db.models import Q, QuerySet
from django.utils import timezone

from mp_core.anamneses.models import Anamnesis

TEMPLATE_CARRY_OVER = (
    "medical_history",
    "surgical_history",
    "family_history",
    "social_history",
    "current_medications",
    "allergies",
)


def anamnesis_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Anamnesis]:
    return Anamnesis.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_anamnesis(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, anamnesis_id: UUID) -> Anamnesis:
    return anamnesis_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).get(id=anamnesis_id)


def search_anamneses(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str = "",
) -> QuerySet[Anamnesis]:
    qs = anamnesis_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")

    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(anamnesis_date__gte=date_from)
    if date_to:
        qs = qs.filter(anamnesis_date__lte=date_to)
    if search:
        qs = qs.filter(
            Q(chief_complaint__icontains=search)
            | Q(diagnosis__icontains=search)
            | Q(patient__full_name__icontains=search)
        )

    return qs.order_by("-anamnesis_date", "-created_at")


def anamnesis_template(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, patient_id: UUID) -> dict:
    """
    Blank anamnesis pre-filled with the history of the patient's latest one.
    """
    last = (
        anamnesis_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .filter(patient_id=patient_id)
        .order_by("-anamnesis_date", "-created_at")
        .first()
    )

    template = {
        "patient_id": str(patient_id),
        "anamnesis_date": timezone.localdate().isoformat(),
        "chief_complaint": "",
        "illness_history": "",
        "medical_history": [],
        "surgical_history": [],
        "family_history": "",
        "social_history": {},
        "current_medications": [],
        "allergies": [],
        "systems_review": {},
        "physical_exam": {},
        "diagnosis": "",
        "treatment_plan": "",
        "additional_notes": "",
    }
    if last is not None:
        for field in TEMPLATE_CARRY_OVER:
            template[field] = getattr(last, field)

    return {"template": template, "has_previous": last is not None}


def anamnesis_report(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    date_from: date,
    date_to: date,
    patient_id: UUID | None = None,
) -> dict:
    qs = search_anamneses(
        tenant_id=tenant_id,
        facility_id=facility_id,
        doctor_id=doctor_id,
        patient_id=patient_id,
        date_from=date_from,
        date_to=date_to,
    )
    rows = list(qs.values("patient_id", "diagnosis"))
    total = len(rows)
    days = (date_to - date_from).days

    diagnoses = Counter(r["diagnosis"].strip() for r in rows if r["diagnosis"] and r["diagnosis"].strip())

    return {
        "period": {"from": date_from.isoformat(), "to": date_to.isoformat()},
        "total": total,
        "unique_patients": len({r["patient_id"] for r in rows}),
        "avg_per_day": round(total / (days + 1), 2),
        "most_common_diagnoses": dict(diagnoses.most_common(5)),
    }
