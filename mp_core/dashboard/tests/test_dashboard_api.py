from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from mp_core.consultations.models import Consultation
from mp_core.exams.models import Exam
from mp_core.finance.models import Bill
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


@pytest.fixture
def clinic_day(tenant, facility, user, patient):
    scope = {"tenant_id": tenant.id, "facility_id": facility.id, "doctor": user, "patient": patient}
    Consultation.objects.create(
        **scope, consultation_date=timezone.now() + timedelta(days=1), reason_for_visit="Enxaqueca recorrente"
    )
    Consultation.objects.create(**scope, consultation_date=timezone.now() - timedelta(days=7), status="completed")
    Exam.objects.create(**scope, exam_name="Hemograma", exam_type="laboratorial", exam_date="2026-05-10")
    Exam.objects.create(
        **scope, exam_name="Glicemia", exam_type="laboratorial", exam_date="2026-05-11", status="completed"
    )
    Bill.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        description="Energia",
        amount=Decimal("180.00"),
        due_date=timezone.localdate() - timedelta(days=1),
        category="utilities",
    )


def test_stats(api_client, tenant, facility, clinic_day):
    r = api_client.get("/api/v1/dashboard/stats/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["patients"] == 1
    assert r.data["consultations"]["total"] == 2
    assert r.data["consultations"]["upcoming"] == 1
    assert r.data["exams"] == {"total": 2, "pending": 1}
    assert r.data["prescriptions"] == {"active": 0}
    assert r.data["bills"] == {"pending": 1, "overdue": 1}


def test_stats_are_per_doctor(other_client, tenant, facility, clinic_day):
    r = other_client.get("/api/v1/dashboard/stats/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["patients"] == 0
    assert r.data["consultations"]["total"] == 0


def test_recent_activity_is_newest_first(api_client, tenant, facility, clinic_day):
    r = api_client.get("/api/v1/dashboard/recent-activity/?limit=3", **scoped(tenant, facility))
    assert r.status_code == 200
    rows = r.data["results"]
    assert len(rows) == 3
    stamps = [row["created_at"] for row in rows]
    assert stamps == sorted(stamps, reverse=True)
    assert {row["type"] for row in rows} <= {"consultation", "exam", "prescription"}


def test_search_needs_two_characters(api_client, tenant, facility):
    r = api_client.get("/api/v1/dashboard/search/?q=a", **scoped(tenant, facility))
    assert r.status_code == 400
    assert "q" in r.data["error"]["details"]


def test_search_spans_entities(api_client, tenant, facility, clinic_day):
    r = api_client.get("/api/v1/dashboard/search/?q=maria", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [p["full_name"] for p in r.data["patients"]] == ["Maria da Silva"]
    assert len(r.data["consultations"]) == 2
    assert len(r.data["exams"]) == 2

    r = api_client.get("/api/v1/dashboard/search/?q=enxaqueca", **scoped(tenant, facility))
    assert r.data["patients"] == []
    assert len(r.data["consultations"]) == 1
