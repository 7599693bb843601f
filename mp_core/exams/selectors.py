# mp_core/exams/selectors.py
from __future__ import annotations

from datetime import date
from uuid import UUID

from django.db.models import Count, Q, QuerySet

from mp_core.exams.models import Exam, ExamStatus


def exam_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Exam]:
    return Exam.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_exam(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, exam_id: UUID) -> Exam:
    return exam_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient").get(id=exam_id)


def search_exams(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    status: str | None = None,
    exam_type: str | None = None,
    exam_category: str | None = None,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str = "",
) -> QuerySet[Exam]:
    qs = exam_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")

    if status:
        qs = qs.filter(status=status)
    if exam_type:
        qs = qs.filter(exam_type=exam_type)
    if exam_category:
        qs = qs.filter(exam_category=exam_category)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(exam_date__gte=date_from)
    if date_to:
        qs = qs.filter(exam_date__lte=date_to)
    if search:
        qs = qs.filter(Q(exam_name__icontains=search) | Q(patient__full_name__icontains=search))

    return qs.order_by("-exam_date", "-created_at")


def pending_exams(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Exam]:
    return (
        exam_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .filter(status=ExamStatus.PENDING)
        .select_related("patient")
        .order_by("exam_date")
    )


def _grouped(qs: QuerySet[Exam], field: str) -> dict:
    return {row[field]: row["count"] for row in qs.values(field).annotate(count=Count("id")).order_by(field)}


def exam_report(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    date_from: date,
    date_to: date,
    exam_type: str | None = None,
    status: str | None = None,
    patient_id: UUID | None = None,
) -> dict:
    qs = search_exams(
        tenant_id=tenant_id,
        facility_id=facility_id,
        doctor_id=doctor_id,
        exam_type=exam_type,
        status=status,
        patient_id=patient_id,
        date_from=date_from,
        date_to=date_to,
    ).order_by()

    total = qs.count()
    completed = qs.filter(status=ExamStatus.COMPLETED).count()

    return {
        "period": {"from": date_from.isoformat(), "to": date_to.isoformat()},
        "total": total,
        "unique_patients": qs.values("patient_id").distinct().count(),
        "by_status": _grouped(qs, "status"),
        "by_type": _grouped(qs, "exam_type"),
        "by_category": _grouped(qs.exclude(exam_category=""), "exam_category"),
        "completion_rate": round(completed / total * 100, 2) if total else 0,
    }
