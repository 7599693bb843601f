from __future__ import annotations

from datetime import date
from uuid import UUID

from django.db.models import QuerySet

from mp_core.schedule.models import ScheduleSlot


def slot_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[ScheduleSlot]:
    return ScheduleSlot.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_slot(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, slot_pk: UUID) -> ScheduleSlot:
    return slot_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).get(id=slot_pk)


def search_slots(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    day: date | None = None,
    status: str | None = None,
    patient_id: UUID | None = None,
) -> QuerySet[ScheduleSlot]:
    qs = slot_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)

    if day:
        qs = qs.for_date(day)
    if status:
        qs = qs.filter(status=status)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)

    return qs.order_by("schedule_date", "start_time")


def available_slots(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, day: date) -> QuerySet[ScheduleSlot]:
    return slot_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).available().for_date(day).order_by("start_time")
