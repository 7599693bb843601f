# mp_core/finance/models.py
from __future__ import annotations

import calendar
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from mp_core.common.models import LiveManager, SoftDeleteModel, SoftDeleteQuerySet
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient

MIN_AMOUNT = Decimal("0.01")


class EntryType(models.TextChoices):
    INCOME = "income", "Income"
    EXPENSE = "expense", "Expense"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    PIX = "pix", "PIX"
    CREDIT_CARD = "credit_card", "Credit card"
    DEBIT_CARD = "debit_card", "Debit card"
    TRANSFER = "transfer", "Bank transfer"


class TransactionStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"


class Frequency(models.TextChoices):
    DAILY = "daily", "Daily"
    WEEKLY = "weekly", "Weekly"
    MONTHLY = "monthly", "Monthly"
    YEARLY = "yearly", "Yearly"


class BillStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    OVERDUE = "overdue", "Overdue"


def _clamp_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def add_months(d: date, months: int, day: int | None = None) -> date:
    """
    Shift d by whole months, clamping the day to the target month's length.
    """
    index = d.month - 1 + months
    year, month = d.year + index // 12, index % 12 + 1
    return _clamp_day(year, month, day or d.day)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


class FinancialTransactionQuerySet(SoftDeleteQuerySet):
    def income(self):
        return self.filter(type=EntryType.INCOME)

    def expense(self):
        return self.filter(type=EntryType.EXPENSE)

    def by_category(self, category: str):
        return self.filter(category=category)

    def by_status(self, status: str):
        return self.filter(status=status)

    def for_month(self, year: int, month: int):
        return self.filter(date__year=year, date__month=month)

    def confirmed(self):
        return self.filter(status=TransactionStatus.CONFIRMED)


class FinancialTransaction(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="financial_transactions")

    description = models.TextField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(MIN_AMOUNT)])
    type = models.CharField(max_length=8, choices=EntryType.choices, db_index=True)
    category = models.CharField(max_length=100, db_index=True)
    date = models.DateTimeField(db_index=True)

    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, db_index=True)
    patient = models.ForeignKey(
        Patient,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="financial_transactions",
    )
    patient_name = models.CharField(max_length=255, blank=True, default="")
    consultation = models.ForeignKey(
        Consultation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="financial_transactions",
    )

    status = models.CharField(
        max_length=16, choices=TransactionStatus.choices, default=TransactionStatus.CONFIRMED, db_index=True
    )

    objects = LiveManager.from_queryset(FinancialTransactionQuerySet)()

    class Meta:
        db_table = "finance_transaction"
        ordering = ["-date"]
        default_manager_name = "objects"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="fin_tx_scope_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type} {self.amount} ({self.category})"


# ---------------------------------------------------------------------------
# Recurring transactions
# ---------------------------------------------------------------------------


class RecurringTransactionQuerySet(SoftDeleteQuerySet):
    def active(self):
        return self.filter(is_active=True)

    def by_frequency(self, frequency: str):
        return self.filter(frequency=frequency)

    def by_type(self, type_: str):
        return self.filter(type=type_)


class RecurringTransaction(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="recurring_transactions")

    description = models.TextField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(MIN_AMOUNT)])
    type = models.CharField(max_length=8, choices=EntryType.choices)
    category = models.CharField(max_length=100)

    frequency = models.CharField(max_length=8, choices=Frequency.choices, db_index=True)
    start_date = models.DateField(db_index=True)
    end_date = models.DateField(null=True, blank=True, db_index=True)
    day_of_month = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
    )

    is_active = models.BooleanField(default=True, db_index=True)

    objects = LiveManager.from_queryset(RecurringTransactionQuerySet)()

    class Meta:
        db_table = "finance_recurring_transaction"
        ordering = ["-created_at"]
        default_manager_name = "objects"
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__isnull=True) | Q(end_date__gte=models.F("start_date")),
                name="ck_recurring_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="fin_rec_scope_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.description} ({self.frequency})"

    def next_execution_date(self, today: date | None = None) -> date | None:
        today = today or timezone.localdate()

        if self.frequency == Frequency.DAILY:
            return today + timedelta(days=1)
        if self.frequency == Frequency.WEEKLY:
            return today + timedelta(days=7)
        if self.frequency == Frequency.MONTHLY:
            anchor = _clamp_day(today.year, today.month, self.day_of_month or today.day)
            return add_months(anchor, 1, day=self.day_of_month or today.day)
        if self.frequency == Frequency.YEARLY:
            return _clamp_day(today.year + 1, today.month, today.day)
        return None


# ---------------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------------


class BillQuerySet(SoftDeleteQuerySet):
    def pending(self):
        return self.filter(status=BillStatus.PENDING)

    def paid(self):
        return self.filter(status=BillStatus.PAID)

    def overdue(self, today: date | None = None):
        today = today or timezone.localdate()
        return self.filter(Q(status=BillStatus.OVERDUE) | Q(status=BillStatus.PENDING, due_date__lt=today))

    def due_this_month(self, today: date | None = None):
        today = today or timezone.localdate()
        return self.filter(due_date__year=today.year, due_date__month=today.month)


class Bill(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bills")

    description = models.TextField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(MIN_AMOUNT)])
    due_date = models.DateField(db_index=True)
    category = models.CharField(max_length=100, db_index=True)

    status = models.CharField(max_length=8, choices=BillStatus.choices, default=BillStatus.PENDING, db_index=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    barcode = models.CharField(max_length=128, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    objects = LiveManager.from_queryset(BillQuerySet)()

    class Meta:
        db_table = "finance_bill"
        ordering = ["due_date"]
        default_manager_name = "objects"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="fin_bill_scope_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.description} due {self.due_date}"

    @property
    def is_overdue(self) -> bool:
        return self.status == BillStatus.PENDING and self.due_date < timezone.localdate()

    @property
    def days_until_due(self) -> int:
        return (self.due_date - timezone.localdate()).days
