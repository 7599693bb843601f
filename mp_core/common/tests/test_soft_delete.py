import pytest

from mp_core.patients.models import Patient

pytestmark = pytest.mark.django_db


def test_soft_delete_hides_row_until_restored(patient):
    patient.soft_delete()

    assert not Patient.objects.filter(id=patient.id).exists()
    assert Patient.all_objects.dead().filter(id=patient.id).exists()

    first_stamp = Patient.all_objects.get(id=patient.id).deleted_at
    patient.soft_delete()
    assert Patient.all_objects.get(id=patient.id).deleted_at == first_stamp

    patient.restore()
    assert Patient.objects.filter(id=patient.id).exists()
    assert Patient.all_objects.alive().filter(id=patient.id).exists()
