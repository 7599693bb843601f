# mp_core/schedule/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.crypto import get_random_string

from mp_core.common.models import LiveManager, SoftDeleteModel, SoftDeleteQuerySet
from mp_core.patients.models import Patient


def new_slot_id() -> str:
    return "slot_" + get_random_string(12)


class SlotStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    BOOKED = "booked", "Booked"
    BLOCKED = "blocked", "Blocked"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class ScheduleSlotQuerySet(SoftDeleteQuerySet):
    def available(self):
        return self.filter(status=SlotStatus.AVAILABLE)

    def booked(self):
        return self.filter(status=SlotStatus.BOOKED)

    def for_date(self, day):
        return self.filter(schedule_date=day)


class ScheduleSlot(SoftDeleteModel):
    slot_id = models.CharField(max_length=64, unique=True, blank=True)

    patient = models.ForeignKey(
        Patient,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="schedule_slots",
    )
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="schedule_slots")

    schedule_date = models.DateField(db_index=True)
    start_time = models.TimeField(db_index=True)
    end_time = models.TimeField()
    duration = models.PositiveIntegerField(default=30)  # minutes

    status = models.CharField(max_length=16, choices=SlotStatus.choices, default=SlotStatus.AVAILABLE, db_index=True)

    patient_name = models.CharField(max_length=255, blank=True, default="")
    patient_phone = models.CharField(max_length=20, blank=True, default="")
    appointment_type = models.CharField(max_length=100, blank=True, default="")
    appointment_reason = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    objects = LiveManager.from_queryset(ScheduleSlotQuerySet)()

    class Meta:
        db_table = "schedule_slot"
        ordering = ["schedule_date", "start_time"]
        default_manager_name = "objects"

    def __str__(self) -> str:
        return f"{self.schedule_date} {self.time_slot}"

    def save(self, *args, **kwargs):
        if not self.slot_id:
            self.slot_id = new_slot_id()
        super().save(*args, **kwargs)

    @property
    def time_slot(self) -> str:
        return f"{self.start_time:%H:%M} - {self.end_time:%H:%M}"
