# mp_core/notes/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.services import apply_updates
from mp_core.notes.models import Note
from mp_core.patients.models import Patient

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("note_title", "note_text", "consultation_date", "note_type", "is_important", "attachments")


def _locked(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, note_id: UUID) -> Note:
    return Note.objects.select_for_update().get(
        id=note_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    )


def _audit(note: Note, code: str, actor_user_id: int, metadata: dict | None = None) -> None:
    AuditService.log(
        event_code=code,
        entity_type="Note",
        entity_id=note.id,
        tenant_id=note.tenant_id,
        facility_id=note.facility_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


class NoteService:
    @staticmethod
    @transaction.atomic
    def create_note(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID, data: dict) -> Note:
        if not Patient.objects.filter(
            id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
        ).exists():
            raise ValidationError({"patient_id": "Patient not found in this scope."})

        note = Note.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            doctor_id=actor_user_id,
            patient_id=patient_id,
            **{k: v for k, v in data.items() if k in EDITABLE_FIELDS},
        )
        _audit(note, "note.created", actor_user_id, {"patient_id": str(patient_id), "note_type": note.note_type})
        logger.info("Note created id=%s patient=%s", note.id, patient_id)
        return note

    @staticmethod
    @transaction.atomic
    def update_note(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, note_id: UUID, data: dict) -> Note:
        note = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, note_id=note_id)

        changed = apply_updates(note, data, EDITABLE_FIELDS)
        note.last_modified = timezone.now()
        note.modified_by_id = actor_user_id
        note.save(update_fields=changed + ["last_modified", "modified_by", "updated_at"])

        _audit(note, "note.updated", actor_user_id, {"updated_fields": sorted(changed)})
        logger.info("Note updated id=%s fields=%s", note.id, sorted(changed))
        return note

    @staticmethod
    @transaction.atomic
    def toggle_important(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, note_id: UUID) -> Note:
        note = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, note_id=note_id)

        note.is_important = not note.is_important
        note.last_modified = timezone.now()
        note.modified_by_id = actor_user_id
        note.save(update_fields=["is_important", "last_modified", "modified_by", "updated_at"])

        _audit(note, "note.importance_toggled", actor_user_id, {"is_important": note.is_important})
        return note

    @staticmethod
    @transaction.atomic
    def delete_note(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, note_id: UUID) -> None:
        note = _locked(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, note_id=note_id)
        note.soft_delete()
        _audit(note, "note.deleted", actor_user_id)
        logger.info("Note soft-deleted id=%s", note.id)
