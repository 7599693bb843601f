from decimal import Decimal

from rest_framework import serializers

from mp_core.finance.models import (
    Bill,
    BillStatus,
    EntryType,
    FinancialTransaction,
    Frequency,
    PaymentMethod,
    RecurringTransaction,
    TransactionStatus,
)

MIN_AMOUNT = Decimal("0.01")


def _at_least_one(attrs):
    if not attrs:
        raise serializers.ValidationError("At least one field is required.")
    return attrs


# Transactions


class TransactionCreateSerializer(serializers.Serializer):
    description = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT)
    type = serializers.ChoiceField(choices=EntryType.choices)
    category = serializers.CharField(max_length=100)
    date = serializers.DateTimeField()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    patient_id = serializers.UUIDField(required=False, allow_null=True)
    patient_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=TransactionStatus.choices, default=TransactionStatus.CONFIRMED)


class TransactionUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT, required=False)
    type = serializers.ChoiceField(choices=EntryType.choices, required=False)
    category = serializers.CharField(max_length=100, required=False)
    date = serializers.DateTimeField(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    patient_id = serializers.UUIDField(required=False, allow_null=True)
    patient_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=TransactionStatus.choices, required=False)

    def validate(self, attrs):
        return _at_least_one(attrs)


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = FinancialTransaction
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
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
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MonthlySummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    income = serializers.DecimalField(max_digits=12, decimal_places=2)
    expense = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    expense_by_category = serializers.DictField(child=serializers.DecimalField(max_digits=12, decimal_places=2))


# Recurring transactions


class RecurringCreateSerializer(serializers.Serializer):
    description = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT)
    type = serializers.ChoiceField(choices=EntryType.choices)
    category = serializers.CharField(max_length=100)
    frequency = serializers.ChoiceField(choices=Frequency.choices)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    day_of_month = serializers.IntegerField(min_value=1, max_value=31, required=False, allow_null=True)
    is_active = serializers.BooleanField(default=True)

    def validate(self, attrs):
        end = attrs.get("end_date")
        if end is not None and end < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date must be on or after the start date."})
        return attrs


class RecurringUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT, required=False)
    type = serializers.ChoiceField(choices=EntryType.choices, required=False)
    category = serializers.CharField(max_length=100, required=False)
    frequency = serializers.ChoiceField(choices=Frequency.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False, allow_null=True)
    day_of_month = serializers.IntegerField(min_value=1, max_value=31, required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        return _at_least_one(attrs)


class RecurringSerializer(serializers.ModelSerializer):
    next_execution_date = serializers.SerializerMethodField()

    class Meta:
        model = RecurringTransaction
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
            "description",
            "amount",
            "type",
            "category",
            "frequency",
            "start_date",
            "end_date",
            "day_of_month",
            "is_active",
            "next_execution_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_next_execution_date(self, obj):
        return obj.next_execution_date()


# Bills


class BillCreateSerializer(serializers.Serializer):
    description = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT)
    due_date = serializers.DateField()
    category = serializers.CharField(max_length=100)
    status = serializers.ChoiceField(choices=BillStatus.choices, default=BillStatus.PENDING)
    barcode = serializers.CharField(max_length=128, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class BillUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=MIN_AMOUNT, required=False)
    due_date = serializers.DateField(required=False)
    category = serializers.CharField(max_length=100, required=False)
    barcode = serializers.CharField(max_length=128, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        return _at_least_one(attrs)


class BillSerializer(serializers.ModelSerializer):
    is_overdue = serializers.BooleanField(read_only=True)
    days_until_due = serializers.IntegerField(read_only=True)

    class Meta:
        model = Bill
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
            "description",
            "amount",
            "due_date",
            "category",
            "status",
            "paid_at",
            "is_overdue",
            "days_until_due",
            "barcode",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
