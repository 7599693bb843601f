from __future__ import annotations

from uuid import UUID

from mp_core.iam.models import FacilityMembership


def _memberships(user_id: int):
    return (
        FacilityMembership.objects.active()
        .for_user(user_id)
        .select_related("facility", "tenant", "role")
        .order_by("-is_primary", "facility__name")
    )


def _row(m: FacilityMembership) -> dict:
    return {
        "tenant_id": str(m.tenant_id),
        "tenant_code": m.tenant.code,
        "facility_id": str(m.facility_id),
        "facility_code": m.facility.code,
        "facility_name": m.facility.name,
        "role_code": m.role.code,
        "role_name": m.role.name,
        "is_primary": m.is_primary,
    }


def list_user_facilities(user_id: int) -> list[dict]:
    """Facilities the user may scope to, primary first."""
    return [_row(m) for m in _memberships(user_id)]


def default_scope(user_id: int) -> dict | None:
    """
    Scope a freshly logged-in client should start with: the primary
    membership, else the first facility by name. None without memberships.
    """
    m = _memberships(user_id).first()
    if m is None:
        return None
    return {"tenant_id": str(m.tenant_id), "facility_id": str(m.facility_id)}


def is_user_member_of_facility(*, user_id: int, tenant_id: UUID, facility_id: UUID) -> bool:
    return (
        FacilityMembership.objects.active()
        .for_user(user_id)
        .filter(tenant_id=tenant_id, facility_id=facility_id)
        .exists()
    )
