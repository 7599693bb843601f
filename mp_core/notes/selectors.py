# mp_core/notes/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import F, Q, QuerySet

from mp_core.notes.models import Note


def note_qs(*, tenant_id: UUID, facility_id: UUID, doctor_id: int) -> QuerySet[Note]:
    return Note.objects.filter(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id)


def get_note(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, note_id: UUID) -> Note:
    return note_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient").get(id=note_id)


def view_note(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, note_id: UUID) -> Note:
    """
    Fetches a note and counts the view.
    """
    note = get_note(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id, note_id=note_id)
    Note.objects.filter(id=note.id).update(view_count=F("view_count") + 1)
    note.refresh_from_db(fields=["view_count"])
    return note


def _text(q: str) -> Q:
    return Q(note_title__icontains=q) | Q(note_text__icontains=q)


def search_notes(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    doctor_id: int,
    patient_id: UUID | None = None,
    note_type: str | None = None,
    important: bool | None = None,
    search: str = "",
) -> QuerySet[Note]:
    qs = note_qs(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id).select_related("patient")

    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if note_type:
        qs = qs.filter(note_type=note_type)
    if important is not None:
        qs = qs.filter(is_important=important)
    if search:
        qs = qs.filter(_text(search))

    return qs.order_by("-created_at")


def quick_search_notes(*, tenant_id: UUID, facility_id: UUID, doctor_id: int, q: str, limit: int = 10) -> list[dict]:
    qs = search_notes(tenant_id=tenant_id, facility_id=facility_id, doctor_id=doctor_id, search=q)[:limit]
    return [
        {
            "id": str(n.id),
            "title": n.note_title,
            "excerpt": n.excerpt,
            "patient": {"id": str(n.patient_id), "full_name": n.patient.full_name},
            "is_important": n.is_important,
            "last_modified": n.last_modified,
        }
        for n in qs
    ]
