from io import StringIO

import pytest
from django.contrib.auth.models import Group
from django.core.management import call_command
from django.core.management.base import CommandError

from mp_core.iam.models import Role

pytestmark = pytest.mark.django_db


def test_creates_groups_once():
    out = StringIO()
    call_command("ensure_roles", stdout=out)
    assert "Groups created: 6" in out.getvalue()
    assert set(Group.objects.values_list("name", flat=True)) >= {"ADMIN", "DOCTOR", "SECRETARY", "READONLY"}

    out = StringIO()
    call_command("ensure_roles", stdout=out)
    assert "Groups created: 0" in out.getvalue()


def test_creates_tenant_roles(tenant):
    out = StringIO()
    call_command("ensure_roles", "--tenant", tenant.code, stdout=out)
    assert f"Roles created for {tenant.code}: 6" in out.getvalue()
    assert Role.objects.get(tenant=tenant, code="secretary").name == "Secretary"


def test_unknown_tenant():
    with pytest.raises(CommandError):
        call_command("ensure_roles", "--tenant", "nope", stdout=StringIO())
