# mp_core/schedule/services.py
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.api.exceptions import ConflictError
from mp_core.common.services import apply_updates
from mp_core.patients.models import Patient
from mp_core.schedule.models import ScheduleSlot, SlotStatus

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "schedule_date",
    "start_time",
    "end_time",
    "duration",
    "status",
    "patient_name",
    "patient_phone",
    "appointment_type",
    "appointment_reason",
    "notes",
)


def _minutes_between(start, end) -> int:
    day = datetime(2000, 1, 1)
    return int((datetime.combine(day, end) - datetime.combine(day, start)).total_seconds() // 60)


def _check_times(start, end) -> None:
    if end <= start:
        raise ValidationError({"end_time": "End time must be after start time."})


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, slot_pk: UUID) -> ScheduleSlot:
    return ScheduleSlot.objects.select_for_update().get(
        id=slot_pk, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    )


def _audit(slot: ScheduleSlot, code: str, actor_user_id: int, metadata: dict | None = None) -> None:
    AuditService.log(
        event_code=code,
        entity_type="ScheduleSlot",
        entity_id=slot.id,
        tenant_id=slot.tenant_id,
        facility_id=slot.facility_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


class ScheduleService:
    @staticmethod
    @transaction.atomic
    def create_slot(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> ScheduleSlot:
        _check_times(data["start_time"], data["end_time"])

        fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
        fields.setdefault("duration", _minutes_between(data["start_time"], data["end_time"]))

        try:
            with transaction.atomic():
                slot = ScheduleSlot.objects.create(
                    tenant_id=tenant_id,
                    facility_id=facility_id,
                    doctor_id=actor_user_id,
                    slot_id=data.get("slot_id") or "",
                    **fields,
                )
        except IntegrityError:
            raise ValidationError({"slot_id": "Slot id already exists."})

        _audit(slot, "schedule_slot.created", actor_user_id, {"date": slot.schedule_date, "time_slot": slot.time_slot})
        logger.info("Slot created id=%s %s %s", slot.id, slot.schedule_date, slot.time_slot)
        return slot

    @staticmethod
    @transaction.atomic
    def update_slot(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, slot_pk: UUID, data: dict) -> ScheduleSlot:
        slot = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, slot_pk=slot_pk)

        changed = apply_updates(slot, data, EDITABLE_FIELDS)
        _check_times(slot.start_time, slot.end_time)
        if changed:
            slot.save(update_fields=changed + ["updated_at"])

        _audit(slot, "schedule_slot.updated", actor_user_id, {"updated_fields": sorted(changed)})
        return slot

    @staticmethod
    @transaction.atomic
    def book(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        slot_pk: UUID,
        patient_id: UUID | None = None,
        patient_name: str = "",
        patient_phone: str = "",
        appointment_type: str = "",
        appointment_reason: str = "",
    ) -> ScheduleSlot:
        slot = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, slot_pk=slot_pk)
        if slot.status != SlotStatus.AVAILABLE:
            logger.warning("Booking rejected slot=%s status=%s", slot.id, slot.status)
            raise ConflictError(f"Slot is not available (status: {slot.status}).")

        patient = None
        if patient_id is not None:
            try:
                patient = Patient.objects.get(
                    id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
                )
            except Patient.DoesNotExist:
                raise ValidationError({"patient_id": "Patient not found in this scope."})

        if patient is None and not patient_name:
            raise ValidationError({"patient_name": "Provide patient_id or patient_name."})

        slot.patient = patient
        slot.patient_name = patient_name or patient.full_name
        slot.patient_phone = patient_phone or (patient.phone if patient else "")
        slot.appointment_type = appointment_type
        slot.appointment_reason = appointment_reason
        slot.status = SlotStatus.BOOKED
        slot.save(
            update_fields=[
                "patient",
                "patient_name",
                "patient_phone",
                "appointment_type",
                "appointment_reason",
                "status",
                "updated_at",
            ]
        )

        _audit(slot, "schedule_slot.booked", actor_user_id, {"patient_id": patient_id, "patient_name": slot.patient_name})
        logger.info("Slot booked id=%s patient=%s", slot.id, patient_id)
        return slot

    @staticmethod
    @transaction.atomic
    def release(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, slot_pk: UUID) -> ScheduleSlot:
        slot = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, slot_pk=slot_pk)
        if slot.status != SlotStatus.BOOKED:
            logger.warning("Release rejected slot=%s status=%s", slot.id, slot.status)
            raise ConflictError(f"Only booked slots can be released (status: {slot.status}).")

        slot.patient = None
        slot.patient_name = ""
        slot.patient_phone = ""
        slot.appointment_type = ""
        slot.appointment_reason = ""
        slot.status = SlotStatus.AVAILABLE
        slot.save(
            update_fields=[
                "patient",
                "patient_name",
                "patient_phone",
                "appointment_type",
                "appointment_reason",
                "status",
                "updated_at",
            ]
        )

        _audit(slot, "schedule_slot.released", actor_user_id)
        logger.info("Slot released id=%s", slot.id)
        return slot

    @staticmethod
    @transaction.atomic
    def delete_slot(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, slot_pk: UUID) -> None:
        slot = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, slot_pk=slot_pk)
        slot.soft_delete()
        _audit(slot, "schedule_slot.deleted", actor_user_id)
        logger.info("Slot soft-deleted id=%s", slot.id)
