# mp_core/finance/selectors.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

from django.db.models import QuerySet, Sum
from django.utils import timezone

from mp_core.finance.models import Bill, FinancialTransaction, RecurringTransaction

ZERO = Decimal("0.00")


def transaction_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[FinancialTransaction]:
    return FinancialTransaction.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_transaction(*, tenant_id: UUID, facility_id: UUID, user_id: int, transaction_id: UUID) -> FinancialTransaction:
    return transaction_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=transaction_id)


def search_transactions(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    user_id: int,
    type: str | None = None,
    category: str | None = None,
    status: str | None = None,
    payment_method: str | None = None,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    search: str = "",
) -> QuerySet[FinancialTransaction]:
    qs = transaction_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)

    if type:
        qs = qs.filter(type=type)
    if category:
        qs = qs.by_category(category)
    if status:
        qs = qs.by_status(status)
    if payment_method:
        qs = qs.filter(payment_method=payment_method)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(date__date__gte=date_from)
    if date_to:
        qs = qs.filter(date__date__lte=date_to)
    if search:
        qs = qs.filter(description__icontains=search)

    return qs.order_by("-date")


def monthly_summary(*, tenant_id: UUID, facility_id: UUID, user_id: int, year: int | None = None, month: int | None = None) -> Dict[str, Any]:
    """
    Confirmed income/expense totals for one calendar month.
    """
    today = timezone.localdate()
    year = year or today.year
    month = month or today.month

    qs = transaction_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).confirmed().for_month(year, month)

    income = qs.income().aggregate(total=Sum("amount"))["total"] or ZERO
    expense = qs.expense().aggregate(total=Sum("amount"))["total"] or ZERO

    by_category = {
        row["category"]: row["total"]
        for row in qs.expense().values("category").annotate(total=Sum("amount")).order_by("category")
    }

    return {
        "year": year,
        "month": month,
        "income": income,
        "expense": expense,
        "balance": income - expense,
        "expense_by_category": by_category,
    }


def recurring_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[RecurringTransaction]:
    return RecurringTransaction.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_recurring(*, tenant_id: UUID, facility_id: UUID, user_id: int, recurring_id: UUID) -> RecurringTransaction:
    return recurring_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=recurring_id)


def search_recurring(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    user_id: int,
    frequency: str | None = None,
    type: str | None = None,
    active: bool | None = None,
) -> QuerySet[RecurringTransaction]:
    qs = recurring_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)

    if frequency:
        qs = qs.by_frequency(frequency)
    if type:
        qs = qs.by_type(type)
    if active is True:
        qs = qs.active()
    elif active is False:
        qs = qs.filter(is_active=False)

    return qs.order_by("-created_at")


def bill_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[Bill]:
    return Bill.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_bill(*, tenant_id: UUID, facility_id: UUID, user_id: int, bill_id: UUID) -> Bill:
    return bill_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=bill_id)


def search_bills(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    user_id: int,
    status: str | None = None,
    category: str | None = None,
    overdue: bool | None = None,
    due_this_month: bool | None = None,
) -> QuerySet[Bill]:
    qs = bill_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)

    if status:
        qs = qs.filter(status=status)
    if category:
        qs = qs.filter(category=category)
    if overdue:
        qs = qs.overdue()
    if due_this_month:
        qs = qs.due_this_month()

    return qs.order_by("due_date")

