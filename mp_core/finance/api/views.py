# mp_core/finance/api/views.py
from __future__ import annotations

from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, flag, int_param, pk_uuid, uuid_or_none
from mp_core.common.permissions import FinancePermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.finance import selectors
from mp_core.finance.api.serializers import (
    BillCreateSerializer,
    BillSerializer,
    BillUpdateSerializer,
    MonthlySummarySerializer,
    RecurringCreateSerializer,
    RecurringSerializer,
    RecurringUpdateSerializer,
    TransactionCreateSerializer,
    TransactionSerializer,
    TransactionUpdateSerializer,
)
from mp_core.finance.models import Bill, FinancialTransaction, RecurringTransaction
from mp_core.finance.services import BillService, RecurringTransactionService, TransactionService


def _owner(request) -> dict:
    return owner_kwargs(request, owner_field="user_id")


class FinancialTransactionViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]

    serializer_class = TransactionSerializer
    queryset = FinancialTransaction.objects.none()

    @extend_schema(
        tags=["Finance"],
        parameters=[
            OpenApiParameter("type", OpenApiTypes.STR, OpenApiParameter.QUERY, description="income | expense"),
            OpenApiParameter("category", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("payment_method", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: TransactionSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_transactions(
            **_owner(request),
            type=qp.get("type") or None,
            category=qp.get("category") or None,
            status=qp.get("status") or None,
            payment_method=qp.get("payment_method") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, TransactionSerializer)

    @extend_schema(tags=["Finance"], request=TransactionCreateSerializer, responses={201: TransactionSerializer})
    def create(self, request):
        ser = TransactionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tx = TransactionService.create_transaction(**scope_kwargs(request), data=ser.validated_data)
        return Response(TransactionSerializer(tx).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Finance"], responses={200: TransactionSerializer})
    def retrieve(self, request, pk=None):
        tx = selectors.get_transaction(**_owner(request), transaction_id=pk_uuid(pk))
        return Response(TransactionSerializer(tx).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], request=TransactionUpdateSerializer, responses={200: TransactionSerializer})
    def partial_update(self, request, pk=None):
        ser = TransactionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tx = TransactionService.update_transaction(
            **scope_kwargs(request), transaction_id=pk_uuid(pk), data=ser.validated_data
        )
        return Response(TransactionSerializer(tx).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], responses={204: None})
    def destroy(self, request, pk=None):
        TransactionService.delete_transaction(**scope_kwargs(request), transaction_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Finance"],
        parameters=[
            OpenApiParameter("year", OpenApiTypes.INT, OpenApiParameter.QUERY),
            OpenApiParameter("month", OpenApiTypes.INT, OpenApiParameter.QUERY),
        ],
        responses={200: MonthlySummarySerializer},
    )
    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request):
        today = timezone.localdate()
        qp = request.query_params
        data = selectors.monthly_summary(
            **_owner(request),
            year=int_param(qp.get("year"), "year", default=today.year, lo=1900, hi=9999),
            month=int_param(qp.get("month"), "month", default=today.month, lo=1, hi=12),
        )
        return Response(MonthlySummarySerializer(data).data, status=status.HTTP_200_OK)


class RecurringTransactionViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]

    serializer_class = RecurringSerializer
    queryset = RecurringTransaction.objects.none()

    @extend_schema(
        tags=["Finance"],
        parameters=[
            OpenApiParameter("frequency", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("active", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
        ],
        responses={200: RecurringSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_recurring(
            **_owner(request),
            frequency=qp.get("frequency") or None,
            type=qp.get("type") or None,
            active=flag(qp.get("active")),
        )
        return paginate(request, qs, RecurringSerializer)

    @extend_schema(tags=["Finance"], request=RecurringCreateSerializer, responses={201: RecurringSerializer})
    def create(self, request):
        ser = RecurringCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        rec = RecurringTransactionService.create_recurring(**scope_kwargs(request), data=ser.validated_data)
        return Response(RecurringSerializer(rec).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Finance"], responses={200: RecurringSerializer})
    def retrieve(self, request, pk=None):
        rec = selectors.get_recurring(**_owner(request), recurring_id=pk_uuid(pk))
        return Response(RecurringSerializer(rec).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], request=RecurringUpdateSerializer, responses={200: RecurringSerializer})
    def partial_update(self, request, pk=None):
        ser = RecurringUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        rec = RecurringTransactionService.update_recurring(
            **scope_kwargs(request), recurring_id=pk_uuid(pk), data=ser.validated_data
        )
        return Response(RecurringSerializer(rec).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], responses={204: None})
    def destroy(self, request, pk=None):
        RecurringTransactionService.delete_recurring(**scope_kwargs(request), recurring_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Finance"], request=None, responses={200: RecurringSerializer})
    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):
        rec = RecurringTransactionService.toggle_active(**scope_kwargs(request), recurring_id=pk_uuid(pk))
        return Response(RecurringSerializer(rec).data, status=status.HTTP_200_OK)


class BillViewSet(viewsets.ViewSet):
    permission_classes = [FinancePermission]

    serializer_class = BillSerializer
    queryset = Bill.objects.none()

    @extend_schema(
        tags=["Finance"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("category", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("overdue", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("due_this_month", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
        ],
        responses={200: BillSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_bills(
            **_owner(request),
            status=qp.get("status") or None,
            category=qp.get("category") or None,
            overdue=flag(qp.get("overdue")),
            due_this_month=flag(qp.get("due_this_month")),
        )
        return paginate(request, qs, BillSerializer)

    @extend_schema(tags=["Finance"], request=BillCreateSerializer, responses={201: BillSerializer})
    def create(self, request):
        ser = BillCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        bill = BillService.create_bill(**scope_kwargs(request), data=ser.validated_data)
        return Response(BillSerializer(bill).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Finance"], responses={200: BillSerializer})
    def retrieve(self, request, pk=None):
        bill = selectors.get_bill(**_owner(request), bill_id=pk_uuid(pk))
        return Response(BillSerializer(bill).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], request=BillUpdateSerializer, responses={200: BillSerializer})
    def partial_update(self, request, pk=None):
        ser = BillUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        bill = BillService.update_bill(**scope_kwargs(request), bill_id=pk_uuid(pk), data=ser.validated_data)
        return Response(BillSerializer(bill).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], responses={204: None})
    def destroy(self, request, pk=None):
        BillService.delete_bill(**scope_kwargs(request), bill_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Finance"], request=None, responses={200: BillSerializer})
    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request, pk=None):
        bill = BillService.mark_as_paid(**scope_kwargs(request), bill_id=pk_uuid(pk))
        return Response(BillSerializer(bill).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Finance"], request=None, responses={200: BillSerializer})
    @action(detail=True, methods=["post"], url_path="mark-overdue")
    def mark_overdue(self, request, pk=None):
        bill = BillService.mark_as_overdue(**scope_kwargs(request), bill_id=pk_uuid(pk))
        return Response(BillSerializer(bill).data, status=status.HTTP_200_OK)
