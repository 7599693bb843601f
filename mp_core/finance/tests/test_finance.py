from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from mp_core.audit.models import AuditEvent
from mp_core.finance.models import Bill, BillStatus, FinancialTransaction, Frequency, RecurringTransaction, add_months
from mp_core.finance.services import BillService
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _bill(tenant, facility, user, *, due_date, status=BillStatus.PENDING, amount="120.00"):
    return Bill.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        description="Aluguel",
        amount=Decimal(amount),
        due_date=due_date,
        category="rent",
        status=status,
    )


def _tx(tenant, facility, user, *, type, amount, category="consulta", day=None, status="confirmed"):
    return FinancialTransaction.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        description=f"{type} {amount}",
        amount=Decimal(amount),
        type=type,
        category=category,
        date=day or timezone.now(),
        payment_method="pix",
        status=status,
    )


def test_add_months_clamps_day():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 11, 30), 2) == date(2027, 1, 30)
    assert add_months(date(2026, 3, 15), 1, day=31) == date(2026, 4, 30)


def test_next_execution_date_per_frequency(tenant, facility, user):
    rec = RecurringTransaction(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        description="Software",
        amount=Decimal("99.90"),
        type="expense",
        category="software",
        frequency=Frequency.MONTHLY,
        start_date=date(2026, 1, 1),
        day_of_month=31,
    )
    today = date(2026, 3, 15)
    assert rec.next_execution_date(today) == date(2026, 4, 30)
    # day_of_month past the end of the current month
    assert rec.next_execution_date(date(2026, 4, 30)) == date(2026, 5, 31)
    assert rec.next_execution_date(date(2026, 1, 31)) == date(2026, 2, 28)

    rec.frequency = Frequency.DAILY
    assert rec.next_execution_date(today) == date(2026, 3, 16)
    rec.frequency = Frequency.WEEKLY
    assert rec.next_execution_date(today) == date(2026, 3, 22)

    rec.frequency = Frequency.YEARLY
    assert rec.next_execution_date(date(2028, 2, 29)) == date(2029, 2, 28)


def test_bill_is_overdue(tenant, facility, user):
    today = timezone.localdate()
    assert _bill(tenant, facility, user, due_date=today - timedelta(days=1)).is_overdue
    assert not _bill(tenant, facility, user, due_date=today).is_overdue
    assert not _bill(tenant, facility, user, due_date=today - timedelta(days=3), status=BillStatus.PAID).is_overdue


def test_bill_days_until_due_is_signed(tenant, facility, user):
    today = timezone.localdate()
    assert _bill(tenant, facility, user, due_date=today + timedelta(days=5)).days_until_due == 5
    assert _bill(tenant, facility, user, due_date=today).days_until_due == 0
    assert _bill(tenant, facility, user, due_date=today - timedelta(days=3)).days_until_due == -3


def test_due_this_month(tenant, facility, user):
    first = _bill(tenant, facility, user, due_date=date(2026, 6, 1))
    last = _bill(tenant, facility, user, due_date=date(2026, 6, 30), status=BillStatus.PAID)
    _bill(tenant, facility, user, due_date=date(2026, 5, 31))
    _bill(tenant, facility, user, due_date=date(2026, 7, 1))

    due = Bill.objects.due_this_month(today=date(2026, 6, 15))
    assert list(due) == [first, last]


def test_create_transaction_fills_patient_name(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/finance/transactions/",
        {
            "description": "Consulta",
            "amount": "250.00",
            "type": "income",
            "category": "consulta",
            "date": timezone.now().isoformat(),
            "payment_method": "pix",
            "patient_id": str(patient.id),
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["patient_name"] == patient.full_name
    assert r.data["status"] == "confirmed"
    assert AuditEvent.objects.filter(event_code="finance.transaction.created").count() == 1


def test_transaction_amount_must_be_positive(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/finance/transactions/",
        {
            "description": "Zero",
            "amount": "0.00",
            "type": "income",
            "category": "consulta",
            "date": timezone.now().isoformat(),
            "payment_method": "cash",
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "amount" in r.data["error"]["details"]


def test_monthly_summary_counts_confirmed_only(api_client, tenant, facility, user):
    _tx(tenant, facility, user, type="income", amount="300.00")
    _tx(tenant, facility, user, type="income", amount="200.00", status="pending")
    _tx(tenant, facility, user, type="expense", amount="50.00", category="material")
    _tx(tenant, facility, user, type="expense", amount="25.00", category="material")

    today = timezone.localdate()
    r = api_client.get(
        f"/api/v1/finance/transactions/summary/?year={today.year}&month={today.month}", **scoped(tenant, facility)
    )
    assert r.status_code == 200, r.data
    assert Decimal(r.data["income"]) == Decimal("300.00")
    assert Decimal(r.data["expense"]) == Decimal("75.00")
    assert Decimal(r.data["balance"]) == Decimal("225.00")
    assert Decimal(r.data["expense_by_category"]["material"]) == Decimal("75.00")


def test_transactions_filter_by_type(api_client, tenant, facility, user):
    _tx(tenant, facility, user, type="income", amount="10.00")
    _tx(tenant, facility, user, type="expense", amount="5.00")

    r = api_client.get("/api/v1/finance/transactions/?type=expense", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
    assert r.data["results"][0]["type"] == "expense"


def test_recurring_rejects_end_before_start(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/finance/recurring/",
        {
            "description": "Aluguel",
            "amount": "1500.00",
            "type": "expense",
            "category": "rent",
            "frequency": "monthly",
            "start_date": "2026-05-01",
            "end_date": "2026-04-01",
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "end_date" in r.data["error"]["details"]


def test_recurring_toggle_active(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/finance/recurring/",
        {
            "description": "Internet",
            "amount": "120.00",
            "type": "expense",
            "category": "utilities",
            "frequency": "monthly",
            "start_date": "2026-01-10",
            "day_of_month": 10,
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["is_active"] is True
    assert r.data["next_execution_date"] is not None
    rec_id = r.data["id"]

    r = api_client.post(f"/api/v1/finance/recurring/{rec_id}/toggle-active/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["is_active"] is False

    r = api_client.get("/api/v1/finance/recurring/?active=true", **scoped(tenant, facility))
    assert r.data["count"] == 0


def test_create_paid_bill_stamps_paid_at(api_client, tenant, facility):
    body = {"description": "Energia", "amount": "310.40", "due_date": "2026-10-05", "category": "utilities"}

    r = api_client.post("/api/v1/finance/bills/", {**body, "status": "paid"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 201, r.data
    assert r.data["status"] == "paid"
    assert r.data["paid_at"] is not None

    r = api_client.post("/api/v1/finance/bills/", body, format="json", **scoped(tenant, facility))
    assert r.status_code == 201, r.data
    assert r.data["status"] == "pending"
    assert r.data["paid_at"] is None


def test_pay_bill_twice_conflicts(api_client, tenant, facility, user):
    bill = _bill(tenant, facility, user, due_date=timezone.localdate() + timedelta(days=5))

    r = api_client.post(f"/api/v1/finance/bills/{bill.id}/pay/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["status"] == "paid"
    assert r.data["paid_at"] is not None

    r = api_client.post(f"/api/v1/finance/bills/{bill.id}/pay/", **scoped(tenant, facility))
    assert r.status_code == 409
    assert r.data["error"]["code"] == "conflict"


def test_mark_overdue_requires_past_due(api_client, tenant, facility, user):
    future = _bill(tenant, facility, user, due_date=timezone.localdate() + timedelta(days=2))
    past = _bill(tenant, facility, user, due_date=timezone.localdate() - timedelta(days=2))

    r = api_client.post(f"/api/v1/finance/bills/{future.id}/mark-overdue/", **scoped(tenant, facility))
    assert r.status_code == 409

    r = api_client.post(f"/api/v1/finance/bills/{past.id}/mark-overdue/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["status"] == "overdue"


def test_overdue_filter_includes_late_pending(api_client, tenant, facility, user):
    today = timezone.localdate()
    _bill(tenant, facility, user, due_date=today - timedelta(days=1))
    _bill(tenant, facility, user, due_date=today + timedelta(days=10))

    r = api_client.get("/api/v1/finance/bills/?overdue=true", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1


def test_mark_overdue_bills_sweep(tenant, facility, user):
    _bill(tenant, facility, user, due_date=date(2026, 1, 5))
    _bill(tenant, facility, user, due_date=date(2026, 1, 20))
    _bill(tenant, facility, user, due_date=date(2026, 1, 1), status=BillStatus.PAID)

    assert BillService.mark_overdue_bills(today=date(2026, 1, 10)) == 1
    assert Bill.objects.filter(status=BillStatus.OVERDUE).count() == 1


def test_mark_overdue_bills_command(tenant, facility, user):
    _bill(tenant, facility, user, due_date=date(2026, 2, 1))

    out = StringIO()
    call_command("mark_overdue_bills", "--today", "2026-02-10", stdout=out)

    assert "Bills marked overdue: 1" in out.getvalue()
    assert Bill.objects.get().status == BillStatus.OVERDUE
