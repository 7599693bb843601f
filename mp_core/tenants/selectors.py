from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from mp_core.tenants.models import Tenant


def visible_tenants(*, user) -> QuerySet[Tenant]:
    """
    Platform admins see every practice, doctors only the ones they belong to.
    """
    if getattr(user, "is_superuser", False):
        return Tenant.objects.order_by("-created_at")
    return Tenant.objects.for_user(user.id).order_by("name")


def get_visible_tenant(*, user, tenant_id: UUID) -> Tenant:
    return visible_tenants(user=user).get(id=tenant_id)
