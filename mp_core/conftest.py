# mp_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from mp_core.facilities.models import Facility
from mp_core.patients.models import Patient
from mp_core.tenants.models import Tenant


def _member(username, tenant, facility, group_name="ADMIN"):
    """
    auth_user -> UserProfile -> FacilityMembership, plus the auth Group the
    role permissions read from.
    """
    from mp_core.iam.models import FacilityMembership, Role, UserProfile

    User = get_user_model()
    user = User.objects.create_user(username=username, password="testpass", is_active=True)

    group, _ = Group.objects.get_or_create(name=group_name)
    user.groups.add(group)

    profile = UserProfile.objects.create(user=user, tenant=tenant, is_active=True)
    role, _ = Role.objects.get_or_create(
        tenant=tenant,
        code=group_name.lower(),
        defaults={"name": group_name.title(), "is_active": True},
    )
    FacilityMembership.objects.create(
        tenant=tenant,
        facility=facility,
        user_profile=profile,
        role=role,
        is_primary=True,
        is_active=True,
    )
    return user


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(code="test-tenant", name="Test Tenant")


@pytest.fixture
def facility(db, tenant):
    return Facility.objects.create(tenant=tenant, code="main", name="Main Facility")


@pytest.fixture
def user(db, tenant, facility):
    return _member("testuser", tenant, facility)


@pytest.fixture
def other_doctor(db, tenant, facility):
    return _member("otherdoc", tenant, facility, group_name="DOCTOR")


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def other_client(other_doctor):
    c = APIClient()
    c.force_authenticate(user=other_doctor)
    return c


@pytest.fixture
def other_tenant(db):
    return Tenant.objects.create(code="other-tenant", name="Other Tenant")


@pytest.fixture
def other_facility(db, other_tenant):
    return Facility.objects.create(tenant=other_tenant, code="other", name="Other Facility")


@pytest.fixture
def patient(db, tenant, facility, user):
    return Patient.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        doctor=user,
        full_name="Maria da Silva",
        mobile_phone="(11) 98765-4321",
        email="maria@example.com",
        cpf="123.456.789-09",
    )
