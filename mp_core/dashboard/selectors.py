# mp_core/dashboard/selectors.py
"""
Read-only aggregates across the clinical and finance apps for one doctor.
"""
from __future__ import annotations

from heapq import nlargest
from uuid import UUID

from django.db.models import Q
from django.utils import timezone

from mp_core.consultations.selectors import consultation_qs
from mp_core.exams.models import ExamStatus
from mp_core.exams.selectors import exam_qs
from mp_core.finance.selectors import bill_qs
from mp_core.notes.selectors import note_qs
from mp_core.patients.selectors import patient_qs, quick_search
from mp_core.prescriptions.selectors import prescription_qs

SEARCH_LIMIT = 5


def dashboard_stats(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> dict:
    scope = {"tenant_id": tenant_id, "facility_id": facility_id, "doctor_id": doctor_id}
    consultations = consultation_qs(**scope)
    exams = exam_qs(**scope)
    bills = bill_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=doctor_id)

    return {
        "patients": patient_qs(**scope).count(),
        "consultations": {
            "total": consultations.count(),
            "today": consultations.filter(consultation_date__date=timezone.localdate()).count(),
            "upcoming": consultations.filter(consultation_date__gte=timezone.now()).count(),
        },
        "exams": {
            "total": exams.count(),
            "pending": exams.filter(status=ExamStatus.PENDING).count(),
        },
        "prescriptions": {"active": prescription_qs(**scope).active().count()},
        "notes": note_qs(**scope).count(),
        "bills": {
            "pending": bills.pending().count(),
            "overdue": bills.overdue().count(),
        },
    }


def recent_activity(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, limit: int = 10) -> list[dict]:
    scope = {"tenant_id": tenant_id, "facility_id": facility_id, "doctor_id": doctor_id}

    items: list[dict] = []
    for c in consultation_qs(**scope).select_related("patient").order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "consultation",
                "id": str(c.id),
                "title": c.reason_for_visit or c.get_consultation_type_display(),
                "patient": c.patient.full_name,
                "status": c.status,
                "created_at": c.created_at,
            }
        )
    for e in exam_qs(**scope).select_related("patient").order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "exam",
                "id": str(e.id),
                "title": e.exam_name,
                "patient": e.patient.full_name,
                "status": e.status,
                "created_at": e.created_at,
            }
        )
    for p in prescription_qs(**scope).select_related("patient").order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "prescription",
                "id": str(p.id),
                "title": p.title,
                "patient": p.patient.full_name,
                "status": p.status,
                "created_at": p.created_at,
            }
        )

    return nlargest(limit, items, key=lambda item: item["created_at"])


def global_search(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, q: str) -> dict:
    scope = {"tenant_id": tenant_id, "facility_id": facility_id, "doctor_id": doctor_id}

    consultations = (
        consultation_qs(**scope)
        .select_related("patient")
        .filter(Q(patient__full_name__icontains=q) | Q(reason_for_visit__icontains=q) | Q(diagnosis__icontains=q))
        .order_by("-consultation_date")[:SEARCH_LIMIT]
    )
    exams = (
        exam_qs(**scope)
        .select_related("patient")
        .filter(Q(exam_name__icontains=q) | Q(patient__full_name__icontains=q))
        .order_by("-exam_date")[:SEARCH_LIMIT]
    )
    prescriptions = (
        prescription_qs(**scope)
        .select_related("patient")
        .filter(Q(title__icontains=q) | Q(patient__full_name__icontains=q))
        .order_by("-issued_at")[:SEARCH_LIMIT]
    )
    notes = (
        note_qs(**scope)
        .select_related("patient")
        .filter(Q(note_title__icontains=q) | Q(note_text__icontains=q))
        .order_by("-created_at")[:SEARCH_LIMIT]
    )

    return {
        "patients": quick_search(**scope, q=q, limit=SEARCH_LIMIT),
        "consultations": [
            {
                "id": str(c.id),
                "patient": c.patient.full_name,
                "consultation_date": c.consultation_date,
                "status": c.status,
            }
            for c in consultations
        ],
        "exams": [
            {"id": str(e.id), "exam_name": e.exam_name, "patient": e.patient.full_name, "status": e.status}
            for e in exams
        ],
        "prescriptions": [
            {"id": str(p.id), "title": p.title, "patient": p.patient.full_name, "status": p.status}
            for p in prescriptions
        ],
        "notes": [
            {"id": str(n.id), "note_title": n.note_title, "patient": n.patient.full_name, "excerpt": n.excerpt}
            for n in notes
        ],
    }
