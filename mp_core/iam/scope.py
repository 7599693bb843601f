# mp_core/iam/scope.py
from __future__ import annotations

from uuid import UUID

from rest_framework.exceptions import PermissionDenied, ValidationError

MISSING_SCOPE_MSG = "Missing scope headers. Provide X-Tenant-Id and X-Facility-Id."
INVALID_SCOPE_MSG = "Invalid scope headers. Provide valid UUIDs for X-Tenant-Id and X-Facility-Id."
NOT_MEMBER_MSG = "You do not have access to the selected facility."


def assert_user_membership(user, *, tenant_id: UUID, facility_id: UUID) -> None:
    """
    403 unless the user is an active member of (tenant_id, facility_id).
    """
    from mp_core.iam.services import membership

    if not user or not getattr(user, "is_authenticated", False):
        raise PermissionDenied("Authentication required to set scope.")

    if not membership.is_user_member_of_facility(user_id=user.id, tenant_id=tenant_id, facility_id=facility_id):
        raise PermissionDenied(NOT_MEMBER_MSG)


def apply_scope_from_headers(request, user=None):
    """
    Used by the auth layer once the user is known.

    No headers: returns None. Otherwise validates the UUIDs, checks
    membership and attaches the scope to the request.
    """
    from mp_core.common.scope import resolve_scope

    scope = resolve_scope(request)
    if scope is None:
        return None

    u = user or getattr(request, "user", None)
    assert_user_membership(u, tenant_id=scope.tenant_id, facility_id=scope.facility_id)

    request.tenant_id = scope.tenant_id
    request.facility_id = scope.facility_id
    request.scope = scope
    return scope


def parse_scope_body(data) -> tuple[UUID, UUID]:
    tenant_raw = data.get("tenant_id")
    facility_raw = data.get("facility_id")
    if not tenant_raw or not facility_raw:
        raise ValidationError({"detail": "Both tenant_id and facility_id are required."})

    try:
        return UUID(str(tenant_raw)), UUID(str(facility_raw))
    except ValueError:
        raise ValidationError({"detail": INVALID_SCOPE_MSG})
