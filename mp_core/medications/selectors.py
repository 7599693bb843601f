from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from mp_core.medications.models import Medication


def medication_qs(*, tenant_id: UUID, facility_id: UUID) -> QuerySet[Medication]:
    return Medication.objects.filter(tenant_id=tenant_id, facility_id=facility_id)


def search_medications(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    q: str = "",
    controlled: bool | None = None,
    form: str | None = None,
    route: str | None = None,
) -> QuerySet[Medication]:
    qs = medication_qs(tenant_id=tenant_id, facility_id=facility_id)

    if q:
        qs = qs.filter(Q(medication_name__icontains=q) | Q(active_ingredient__icontains=q))
    if controlled is not None:
        qs = qs.filter(is_controlled=controlled)
    if form:
        qs = qs.filter(form__iexact=form)
    if route:
        qs = qs.filter(route__iexact=route)

    return qs.order_by("medication_name")
