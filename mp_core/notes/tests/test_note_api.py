import pytest

from mp_core.notes.models import Note
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


@pytest.fixture
def note(tenant, facility, user, patient):
    return Note.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        doctor=user,
        patient=patient,
        note_title="Retorno",
        note_text="Paciente relata melhora da dor lombar.",
    )


def test_create_note_defaults_to_general(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/notes/",
        {"patient_id": str(patient.id), "note_title": "Obs", "note_text": "Pressão controlada."},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["note_type"] == "general"
    assert r.data["is_important"] is False
    assert r.data["view_count"] == 0


def test_note_text_is_capped(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/notes/",
        {"patient_id": str(patient.id), "note_title": "Longa", "note_text": "x" * 5001},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "note_text" in r.data["error"]["details"]


def test_retrieve_counts_views(api_client, tenant, facility, note):
    api_client.get(f"/api/v1/notes/{note.id}/", **scoped(tenant, facility))
    r = api_client.get(f"/api/v1/notes/{note.id}/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["view_count"] == 2


def test_update_stamps_modifier(api_client, tenant, facility, user, note):
    r = api_client.patch(
        f"/api/v1/notes/{note.id}/",
        {"note_text": "Sem dor."},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["modified_by_id"] == user.id
    assert r.data["last_modified"] is not None


def test_toggle_important_and_filter(api_client, tenant, facility, note):
    r = api_client.post(f"/api/v1/notes/{note.id}/toggle-important/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["is_important"] is True

    r = api_client.get("/api/v1/notes/?important=true", **scoped(tenant, facility))
    assert r.data["count"] == 1
    r = api_client.get("/api/v1/notes/?important=false", **scoped(tenant, facility))
    assert r.data["count"] == 0


def test_search_returns_excerpt_and_patient(api_client, tenant, facility, patient, note):
    r = api_client.get("/api/v1/notes/search/?q=lombar", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data[0]["title"] == "Retorno"
    assert r.data[0]["patient"]["full_name"] == patient.full_name

    r = api_client.get("/api/v1/notes/search/?q=l", **scoped(tenant, facility))
    assert r.status_code == 400


def test_excerpt_truncates_long_text():
    assert Note(note_text="a" * 120).excerpt == "a" * 100 + "..."
    assert Note(note_text="curto").excerpt == "curto"
