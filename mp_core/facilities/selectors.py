from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from mp_core.facilities.models import Facility


def facility_qs(*, tenant_id: UUID) -> QuerySet[Facility]:
    return Facility.objects.select_related("tenant").filter(tenant_id=tenant_id)


def facilities_for_tenant(*, tenant_id: UUID, active_only: bool = True, q: str | None = None) -> QuerySet[Facility]:
    qs = facility_qs(tenant_id=tenant_id)
    if active_only:
        qs = qs.filter(is_active=True)

    term = (q or "").strip()
    if term:
        qs = qs.filter(Q(name__icontains=term) | Q(city__icontains=term) | Q(code__icontains=term))

    return qs.order_by("name")


def get_facility(*, tenant_id: UUID, facility_id: UUID) -> Facility:
    return facility_qs(tenant_id=tenant_id).get(id=facility_id)
