# mp_core/common/scope.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from rest_framework.exceptions import ValidationError

from mp_core.iam.scope import INVALID_SCOPE_MSG, MISSING_SCOPE_MSG


@dataclass(frozen=True)
class Scope:
    tenant_id: UUID
    facility_id: UUID


HDR_TENANT = "X-Tenant-Id"
HDR_FACILITY = "X-Facility-Id"


def _parse_uuid(value) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _get_header(request, name: str) -> Optional[str]:
    """
    request.headers is case-insensitive; fallback to META for RequestFactory.
    """
    headers = getattr(request, "headers", None)
    if headers is not None:
        v = headers.get(name)
        if v:
            return v

    meta_key = "HTTP_" + name.upper().replace("-", "_")
    return request.META.get(meta_key)


def resolve_scope(request) -> Optional[Scope]:
    """
    Pure resolver.
    - None when NO scope headers are present.
    - Raises ValidationError when partial or not UUIDs.
    """
    t = getattr(request, "tenant_id", None)
    f = getattr(request, "facility_id", None)
    if t and f:
        tu = _parse_uuid(t)
        fu = _parse_uuid(f)
        if tu and fu:
            return Scope(tenant_id=tu, facility_id=fu)

    tenant_raw = _get_header(request, HDR_TENANT)
    facility_raw = _get_header(request, HDR_FACILITY)

    if not tenant_raw and not facility_raw:
        return None

    if not tenant_raw or not facility_raw:
        raise ValidationError({"detail": MISSING_SCOPE_MSG})

    tenant_id = _parse_uuid(tenant_raw)
    facility_id = _parse_uuid(facility_raw)
    if not tenant_id or not facility_id:
        raise ValidationError({"detail": INVALID_SCOPE_MSG})

    return Scope(tenant_id=tenant_id, facility_id=facility_id)


def require_scope(request) -> Scope:
    """
    Scope for a view. Membership is enforced earlier (middleware/auth layer),
    so this only guarantees the ids are present and well formed.
    """
    scope = resolve_scope(request)
    if scope is None:
        raise ValidationError({"detail": MISSING_SCOPE_MSG})

    request.tenant_id = scope.tenant_id
    request.facility_id = scope.facility_id
    request.scope = scope
    return scope


def actor_id(request) -> int | None:
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user.id
    return None


def scope_kwargs(request) -> dict:
    """
    tenant_id / facility_id / actor_user_id for service and selector calls.
    The acting user is also the owner of the records it touches.
    """
    scope = require_scope(request)
    return {"tenant_id": scope.tenant_id, "facility_id": scope.facility_id, "actor_user_id": actor_id(request)}


def owner_kwargs(request, owner_field: str = "doctor_id") -> dict:
    kw = scope_kwargs(request)
    return {"tenant_id": kw["tenant_id"], "facility_id": kw["facility_id"], owner_field: kw["actor_user_id"]}
