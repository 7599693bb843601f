# mp_core/notes/models.py
from django.conf import settings
from django.db import models

from mp_core.common.models import SoftDeleteModel
from mp_core.patients.models import Patient

NOTE_TEXT_MAX_LENGTH = 5000


class NoteType(models.TextChoices):
    CONSULTATION = "consultation", "Consultation"
    OBSERVATION = "observation", "Observation"
    REMINDER = "reminder", "Reminder"
    TREATMENT = "treatment", "Treatment"
    FOLLOW_UP = "follow_up", "Follow-up"
    GENERAL = "general", "General"


class Note(SoftDeleteModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="clinical_notes")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notes")

    note_title = models.CharField(max_length=255)
    note_text = models.TextField(max_length=NOTE_TEXT_MAX_LENGTH)
    consultation_date = models.DateTimeField(null=True, blank=True)

    note_type = models.CharField(max_length=16, choices=NoteType.choices, default=NoteType.GENERAL, db_index=True)
    is_important = models.BooleanField(default=False, db_index=True)
    attachments = models.JSONField(default=list, blank=True)

    last_modified = models.DateTimeField(null=True, blank=True)
    modified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="modified_notes",
    )
    view_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "notes_note"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.note_title

    @property
    def excerpt(self) -> str:
        if len(self.note_text) <= 100:
            return self.note_text
        return self.note_text[:100] + "..."
