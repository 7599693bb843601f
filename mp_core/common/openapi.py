from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter

from mp_core.common.middleware import OPTIONAL, REQUIRED, scope_policy

SCOPE_HEADERS = (
    ("X-Tenant-Id", "Practice (tenant) UUID."),
    ("X-Facility-Id", "Facility UUID; the caller must hold an active membership."),
)


def scope_parameters(*, required: bool) -> list[OpenApiParameter]:
    return [
        OpenApiParameter(
            name=name,
            type=OpenApiTypes.UUID,
            location=OpenApiParameter.HEADER,
            required=required,
            description=description,
        )
        for name, description in SCOPE_HEADERS
    ]


class ScopedAutoSchema(AutoSchema):
    """
    Documents the scope headers exactly where TenantFacilityScopeMiddleware
    looks for them: required on scoped paths, optional on /me/ and tenant
    management, absent on auth and docs.
    """

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])

        policy = scope_policy(getattr(self, "path", "") or "")
        if policy not in (OPTIONAL, REQUIRED):
            return params

        declared = {p.name.lower() for p in params if isinstance(p, OpenApiParameter)}
        params.extend(p for p in scope_parameters(required=policy == REQUIRED) if p.name.lower() not in declared)
        return params


def exclude_alias_endpoints(endpoints):
    """
    Preprocessing hook: /api/* mirrors /api/v1/*; only the versioned paths
    go into the schema.
    """
    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if path.startswith("/api/v1/") or not path.startswith("/api/")
    ]
