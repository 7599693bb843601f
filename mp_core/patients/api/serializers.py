# mp_core/patients/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from mp_core.common.validators import cep_validator, validate_cpf, validate_phone
from mp_core.patients.models import BloodType, Gender, Patient

JSON_LIST_FIELDS = (
    "allergies",
    "congenital_diseases",
    "chronic_diseases",
    "medications",
    "surgical_history",
    "family_history",
)
JSON_OBJECT_FIELDS = ("vital_signs", "emergency_contact", "health_insurance")


class PatientWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_blank=True)

    mobile_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, validators=[validate_phone])
    landline = serializers.CharField(max_length=20, required=False, allow_blank=True, validators=[validate_phone])
    email = serializers.EmailField(required=False, allow_blank=True)

    address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=2, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=9, required=False, allow_blank=True, validators=[cep_validator])

    cpf = serializers.CharField(max_length=14, required=False, allow_blank=True, validators=[validate_cpf])
    rg = serializers.CharField(max_length=20, required=False, allow_blank=True)

    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False, allow_blank=True)
    height_cm = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True,
        min_value=Decimal("50"), max_value=Decimal("250"),
    )
    weight_kg = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True,
        min_value=Decimal("1"), max_value=Decimal("500"),
    )
    is_smoker = serializers.BooleanField(required=False)
    is_alcohol_consumer = serializers.BooleanField(required=False)

    allergies = serializers.ListField(required=False)
    congenital_diseases = serializers.ListField(required=False)
    chronic_diseases = serializers.ListField(required=False)
    medications = serializers.ListField(required=False)
    surgical_history = serializers.ListField(required=False)
    family_history = serializers.ListField(required=False)
    vital_signs = serializers.DictField(required=False)
    emergency_contact = serializers.DictField(required=False)
    health_insurance = serializers.DictField(required=False)

    notes = serializers.CharField(required=False, allow_blank=True)
    favorite = serializers.BooleanField(required=False)

    def validate_state(self, value: str) -> str:
        return value.upper()


class PatientCreateSerializer(PatientWriteSerializer):
    pass


class PatientUpdateSerializer(PatientWriteSerializer):
    full_name = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    phone = serializers.CharField(read_only=True)
    age = serializers.IntegerField(read_only=True, allow_null=True)
    bmi = serializers.SerializerMethodField()

    class Meta:
        model = Patient
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "doctor_id",
            "full_name",
            "date_of_birth",
            "age",
            "gender",
            "phone",
            "mobile_phone",
            "landline",
            "email",
            "address",
            "city",
            "state",
            "postal_code",
            "cpf",
            "rg",
            "blood_type",
            "height_cm",
            "weight_kg",
            "bmi",
            "is_smoker",
            "is_alcohol_consumer",
            *JSON_LIST_FIELDS,
            *JSON_OBJECT_FIELDS,
            "notes",
            "last_consultation_date",
            "favorite",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_bmi(self, obj: Patient) -> float | None:
        return obj.bmi()
