# mp_core/consultations/selectors.py
from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID

from django.db.models import Avg, Count, Q, QuerySet
from django.db.models.functions import TruncDate
from django.utils import timezone

from mp_core.consultations.models import Consultation, ConsultationStatus


def consultation_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Consultation]:
    return Consultation.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_consultation(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, consultation_id: UUID) -> Consultation:
    return (
        consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .select_related("patient")
        .get(id=consultation_id)
    )


def search_consultations(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    status: str | None = None,
    consultation_type: str | None = None,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str = "",
) -> QuerySet[Consultation]:
    qs = consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")

    if status:
        qs = qs.filter(status=status)
    if consultation_type:
        qs = qs.filter(consultation_type=consultation_type)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(consultation_date__date__gte=date_from)
    if date_to:
        qs = qs.filter(consultation_date__date__lte=date_to)
    if search:
        qs = qs.filter(
            Q(patient__full_name__icontains=search)
            | Q(reason_for_visit__icontains=search)
            | Q(diagnosis__icontains=search)
        )

    return qs.order_by("-consultation_date")


def today_consultations(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Consultation]:
    return (
        consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .filter(consultation_date__date=timezone.localdate())
        .select_related("patient")
        .order_by("consultation_time", "consultation_date")
    )


def upcoming_consultations(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, limit: int = 10):
    return (
        consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
        .filter(consultation_date__gte=timezone.now())
        .select_related("patient")
        .order_by("consultation_date", "consultation_time")[:limit]
    )


def _status_counts(qs: QuerySet[Consultation], *statuses: ConsultationStatus) -> dict:
    return {s.value: qs.filter(status=s).count() for s in statuses}


def consultation_summary(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> dict:
    qs = consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)
    avg = qs.aggregate(v=Avg("consultation_duration"))["v"]
    return {
        "total": qs.count(),
        "today": qs.filter(consultation_date__date=timezone.localdate()).count(),
        "upcoming": qs.filter(consultation_date__gte=timezone.now()).count(),
        **_status_counts(
            qs,
            ConsultationStatus.COMPLETED,
            ConsultationStatus.SCHEDULED,
            ConsultationStatus.CANCELLED,
        ),
        "avg_duration": round(float(avg), 2) if avg is not None else 0,
    }


def consultation_stats(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, period: int = 30) -> dict:
    """
    Period breakdown (last `period` days) plus the all-time summary.
    """
    start = timezone.now() - timedelta(days=period)
    in_period = consultation_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).filter(
        consultation_date__gte=start
    )

    by_type = {
        row["consultation_type"]: row["count"]
        for row in in_period.values("consultation_type").annotate(count=Count("id")).order_by("consultation_type")
    }
    by_day = [
        {"date": row["day"].isoformat(), "count": row["count"]}
        for row in in_period.annotate(day=TruncDate("consultation_date"))
        .values("day")
        .annotate(count=Count("id"))
        .order_by("day")
    ]

    return {
        "period": period,
        "period_stats": {
            "total": in_period.count(),
            **_status_counts(
                in_period,
                ConsultationStatus.COMPLETED,
                ConsultationStatus.CANCELLED,
                ConsultationStatus.NO_SHOW,
            ),
        },
        "by_type": by_type,
        "by_day": by_day,
        "summary": consultation_summary(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id),
    }
