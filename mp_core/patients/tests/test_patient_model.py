from datetime import date
from decimal import Decimal

from mp_core.patients.models import Patient


def test_age_counts_whole_years():
    today = date.today()
    p = Patient(full_name="x", date_of_birth=date(today.year - 30, 1, 1))
    assert p.age in (29, 30)
    assert Patient(full_name="y").age is None


def test_bmi_rounds_to_two_places():
    p = Patient(full_name="x", height_cm=Decimal("180"), weight_kg=Decimal("81"))
    assert p.bmi() == 25.0
    assert Patient(full_name="y", weight_kg=Decimal("70")).bmi() is None


def test_phone_prefers_mobile():
    assert Patient(full_name="x", mobile_phone="11999990000", landline="1133334444").phone == "11999990000"
    assert Patient(full_name="x", landline="1133334444").phone == "1133334444"
