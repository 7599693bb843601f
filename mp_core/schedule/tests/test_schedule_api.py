from datetime import date, time

import pytest

from mp_core.schedule.models import ScheduleSlot
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db

DAY = "2026-11-03"


@pytest.fixture
def slot(tenant, facility, user):
    return ScheduleSlot.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        doctor=user,
        schedule_date=date(2026, 11, 3),
        start_time=time(9, 0),
        end_time=time(9, 30),
    )


def test_create_slot_generates_id_and_duration(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/schedule/slots/",
        {"schedule_date": DAY, "start_time": "14:00", "end_time": "14:45"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["slot_id"].startswith("slot_")
    assert r.data["duration"] == 45
    assert r.data["status"] == "available"
    assert r.data["time_slot"] == "14:00 - 14:45"


def test_create_slot_rejects_inverted_times(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/schedule/slots/",
        {"schedule_date": DAY, "start_time": "10:00", "end_time": "09:00"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "end_time" in r.data["error"]["details"]


def test_duplicate_slot_id_is_rejected(api_client, tenant, facility, slot):
    r = api_client.post(
        "/api/v1/schedule/slots/",
        {"slot_id": slot.slot_id, "schedule_date": DAY, "start_time": "11:00", "end_time": "11:30"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "slot_id" in r.data["error"]["details"]


def test_book_with_patient_fills_contact(api_client, tenant, facility, slot, patient):
    r = api_client.post(
        f"/api/v1/schedule/slots/{slot.id}/book/",
        {"patient_id": str(patient.id), "appointment_type": "retorno"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["status"] == "booked"
    assert r.data["patient_name"] == patient.full_name
    assert r.data["patient_phone"] == patient.phone
    assert str(r.data["patient_id"]) == str(patient.id)


def test_booking_a_booked_slot_conflicts(api_client, tenant, facility, slot):
    body = {"patient_name": "Walk-in"}
    r = api_client.post(f"/api/v1/schedule/slots/{slot.id}/book/", body, format="json", **scoped(tenant, facility))
    assert r.status_code == 200

    r = api_client.post(f"/api/v1/schedule/slots/{slot.id}/book/", body, format="json", **scoped(tenant, facility))
    assert r.status_code == 409
    assert r.data["error"]["code"] == "conflict"


def test_booking_needs_patient(api_client, tenant, facility, slot):
    r = api_client.post(f"/api/v1/schedule/slots/{slot.id}/book/", {}, format="json", **scoped(tenant, facility))
    assert r.status_code == 400


def test_release_clears_booking(api_client, tenant, facility, slot, patient):
    api_client.post(
        f"/api/v1/schedule/slots/{slot.id}/book/",
        {"patient_id": str(patient.id)},
        format="json",
        **scoped(tenant, facility),
    )

    r = api_client.post(f"/api/v1/schedule/slots/{slot.id}/release/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["status"] == "available"
    assert r.data["patient_id"] is None
    assert r.data["patient_name"] == ""

    r = api_client.post(f"/api/v1/schedule/slots/{slot.id}/release/", **scoped(tenant, facility))
    assert r.status_code == 409


def test_available_requires_date_and_filters(api_client, tenant, facility, user, slot):
    ScheduleSlot.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, schedule_date=date(2026, 11, 3),
        start_time=time(10, 0), end_time=time(10, 30), status="blocked",
    )

    r = api_client.get("/api/v1/schedule/slots/available/", **scoped(tenant, facility))
    assert r.status_code == 400

    r = api_client.get(f"/api/v1/schedule/slots/available/?date={DAY}", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [row["id"] for row in r.data] == [str(slot.id)]


def test_list_by_date(api_client, tenant, facility, user, slot):
    ScheduleSlot.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, schedule_date=date(2026, 11, 4),
        start_time=time(9, 0), end_time=time(9, 30),
    )
    r = api_client.get(f"/api/v1/schedule/slots/?date={DAY}", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
