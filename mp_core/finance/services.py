# mp_core/finance/services.py
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.api.exceptions import ConflictError
from mp_core.common.services import apply_updates
from mp_core.consultations.models import Consultation
from mp_core.finance.models import Bill, BillStatus, FinancialTransaction, RecurringTransaction
from mp_core.patients.models import Patient

logger = logging.getLogger(__name__)

TRANSACTION_FIELDS = (
    "description",
    "amount",
    "type",
    "category",
    "date",
    "payment_method",
    "patient_id",
    "patient_name",
    "consultation_id",
    "status",
)

RECURRING_FIELDS = (
    "description",
    "amount",
    "type",
    "category",
    "frequency",
    "start_date",
    "end_date",
    "day_of_month",
    "is_active",
)

BILL_FIELDS = ("description", "amount", "due_date", "category", "status", "barcode", "notes")


def _audit(obj, code: str, actor_user_id: int, metadata: dict | None = None) -> None:
    AuditService.log(
        event_code=code,
        entity_type=obj.__class__.__name__,
        entity_id=obj.id,
        tenant_id=obj.tenant_id,
        facility_id=obj.facility_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


def _check_links(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> None:
    patient_id = data.get("patient_id")
    if patient_id is not None and not Patient.objects.filter(
        id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    ).exists():
        raise ValidationError({"patient_id": "Patient not found in this scope."})

    consultation_id = data.get("consultation_id")
    if consultation_id is not None and not Consultation.objects.filter(
        id=consultation_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id
    ).exists():
        raise ValidationError({"consultation_id": "Consultation not found in this scope."})


def _check_period(start_date: date, end_date: date | None) -> None:
    if end_date is not None and end_date < start_date:
        raise ValidationError({"end_date": "End date must be on or after the start date."})


def _locked(model, *, tenant_id: UUID, facility_id: UUID, actor_user_id: int, pk: UUID):
    return model.objects.select_for_update().get(
        id=pk, tenant_id=tenant_id, facility_id=facility_id, user_id=actor_user_id
    )


class TransactionService:
    @staticmethod
    @transaction.atomic
    def create_transaction(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> FinancialTransaction:
        _check_links(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, data=data)

        fields = {k: v for k, v in data.items() if k in TRANSACTION_FIELDS}
        if fields.get("patient_id") and not fields.get("patient_name"):
            fields["patient_name"] = Patient.objects.values_list("full_name", flat=True).get(id=fields["patient_id"])

        tx = FinancialTransaction.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            user_id=actor_user_id,
            **fields,
        )

        _audit(tx, "finance.transaction.created", actor_user_id, {"type": tx.type, "amount": tx.amount})
        logger.info("Transaction created id=%s type=%s amount=%s", tx.id, tx.type, tx.amount)
        return tx

    @staticmethod
    @transaction.atomic
    def update_transaction(
        *, tenant_id: UUID, facility_id: UUID, actor_user_id: int, transaction_id: UUID, data: dict
    ) -> FinancialTransaction:
        tx = _locked(
            FinancialTransaction, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=transaction_id
        )
        _check_links(tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, data=data)

        changed = apply_updates(tx, data, TRANSACTION_FIELDS)
        if changed:
            tx.save(update_fields=changed + ["updated_at"])

        _audit(tx, "finance.transaction.updated", actor_user_id, {"updated_fields": sorted(changed)})
        logger.info("Transaction updated id=%s fields=%s", tx.id, changed)
        return tx

    @staticmethod
    @transaction.atomic
    def delete_transaction(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, transaction_id: UUID) -> None:
        tx = _locked(
            FinancialTransaction, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=transaction_id
        )
        tx.soft_delete()
        _audit(tx, "finance.transaction.deleted", actor_user_id)
        logger.info("Transaction soft-deleted id=%s", tx.id)


class RecurringTransactionService:
    @staticmethod
    @transaction.atomic
    def create_recurring(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> RecurringTransaction:
        _check_period(data["start_date"], data.get("end_date"))

        rec = RecurringTransaction.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            user_id=actor_user_id,
            **{k: v for k, v in data.items() if k in RECURRING_FIELDS},
        )

        _audit(rec, "finance.recurring.created", actor_user_id, {"frequency": rec.frequency, "amount": rec.amount})
        logger.info("Recurring transaction created id=%s frequency=%s", rec.id, rec.frequency)
        return rec

    @staticmethod
    @transaction.atomic
    def update_recurring(
        *, tenant_id: UUID, facility_id: UUID, actor_user_id: int, recurring_id: UUID, data: dict
    ) -> RecurringTransaction:
        rec = _locked(
            RecurringTransaction, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=recurring_id
        )

        changed = apply_updates(rec, data, RECURRING_FIELDS)
        _check_period(rec.start_date, rec.end_date)
        if changed:
            rec.save(update_fields=changed + ["updated_at"])

        _audit(rec, "finance.recurring.updated", actor_user_id, {"updated_fields": sorted(changed)})
        return rec

    @staticmethod
    @transaction.atomic
    def toggle_active(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, recurring_id: UUID) -> RecurringTransaction:
        rec = _locked(
            RecurringTransaction, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=recurring_id
        )
        rec.is_active = not rec.is_active
        rec.save(update_fields=["is_active", "updated_at"])

        _audit(rec, "finance.recurring.toggled", actor_user_id, {"is_active": rec.is_active})
        logger.info("Recurring transaction id=%s is_active=%s", rec.id, rec.is_active)
        return rec

    @staticmethod
    @transaction.atomic
    def delete_recurring(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, recurring_id: UUID) -> None:
        rec = _locked(
            RecurringTransaction, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=recurring_id
        )
        rec.soft_delete()
        _audit(rec, "finance.recurring.deleted", actor_user_id)
        logger.info("Recurring transaction soft-deleted id=%s", rec.id)


class BillService:
    @staticmethod
    @transaction.atomic
    def create_bill(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> Bill:
        fields = {k: v for k, v in data.items() if k in BILL_FIELDS}
        if fields.get("status") == BillStatus.PAID:
            fields["paid_at"] = timezone.now()

        bill = Bill.objects.create(tenant_id=tenant_id, facility_id=facility_id, user_id=actor_user_id, **fields)

        _audit(bill, "finance.bill.created", actor_user_id, {"amount": bill.amount, "due_date": bill.due_date})
        logger.info("Bill created id=%s due=%s", bill.id, bill.due_date)
        return bill

    @staticmethod
    @transaction.atomic
    def update_bill(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, bill_id: UUID, data: dict) -> Bill:
        bill = _locked(Bill, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=bill_id)

        changed = apply_updates(bill, data, BILL_FIELDS)
        if changed:
            bill.save(update_fields=changed + ["updated_at"])

        _audit(bill, "finance.bill.updated", actor_user_id, {"updated_fields": sorted(changed)})
        return bill

    @staticmethod
    @transaction.atomic
    def mark_as_paid(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, bill_id: UUID) -> Bill:
        bill = _locked(Bill, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=bill_id)
        if bill.status == BillStatus.PAID:
            logger.warning("Payment rejected: bill=%s already paid", bill.id)
            raise ConflictError("Bill is already paid.")

        bill.status = BillStatus.PAID
        bill.paid_at = timezone.now()
        bill.save(update_fields=["status", "paid_at", "updated_at"])

        _audit(bill, "finance.bill.paid", actor_user_id, {"amount": bill.amount})
        logger.info("Bill paid id=%s", bill.id)
        return bill

    @staticmethod
    @transaction.atomic
    def mark_as_overdue(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, bill_id: UUID) -> Bill:
        bill = _locked(Bill, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=bill_id)
        if not bill.is_overdue:
            logger.warning("Overdue rejected: bill=%s status=%s due=%s", bill.id, bill.status, bill.due_date)
            raise ConflictError("Only pending bills past their due date can be marked overdue.")

        bill.status = BillStatus.OVERDUE
        bill.save(update_fields=["status", "updated_at"])

        _audit(bill, "finance.bill.overdue", actor_user_id, {"due_date": bill.due_date})
        logger.info("Bill marked overdue id=%s", bill.id)
        return bill

    @staticmethod
    @transaction.atomic
    def mark_overdue_bills(*, today: date | None = None, tenant_id: UUID | None = None) -> int:
        """
        Batch sweep: pending bills past due become overdue. Returns the count.
        """
        today = today or timezone.localdate()
        qs = Bill.objects.pending().filter(due_date__lt=today)
        if tenant_id is not None:
            qs = qs.filter(tenant_id=tenant_id)

        count = qs.update(status=BillStatus.OVERDUE, updated_at=timezone.now())
        logger.info("Overdue sweep: %d bill(s) marked overdue (today=%s)", count, today)
        return count

    @staticmethod
    @transaction.atomic
    def delete_bill(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, bill_id: UUID) -> None:
        bill = _locked(Bill, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=bill_id)
        bill.soft_delete()
        _audit(bill, "finance.bill.deleted", actor_user_id)
        logger.info("Bill soft-deleted id=%s", bill.id)
