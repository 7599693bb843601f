from __future__ import annotations

import logging

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import ValidationError

from mp_core.common.api.exceptions import build_error_envelope
from mp_core.common.scope import resolve_scope
from mp_core.iam.scope import MISSING_SCOPE_MSG, NOT_MEMBER_MSG

logger = logging.getLogger(__name__)

SKIP, OPTIONAL, REQUIRED = "skip", "optional", "required"


def scope_policy(path: str) -> str:
    """
    How strictly a path needs the X-Tenant-Id / X-Facility-Id pair.

    skip: outside the API, docs/schema/admin, the API root and auth endpoints.
    optional: /me/, /me/profile/ and tenant management (validated when sent).
    required: every other API path.
    """
    if path.startswith(("/admin/", "/api/docs/", "/api/redoc/", "/api/schema/")):
        return SKIP
    if not path.startswith("/api/"):
        return SKIP
    if path in ("/api/", "/api/v1/"):
        return SKIP
    if path.endswith(("/auth/login/", "/auth/refresh/", "/auth/logout/")):
        return SKIP
    if path.endswith(("/me/", "/me/profile/")) or path.startswith(("/api/v1/tenants/", "/api/tenants/")):
        return OPTIONAL
    return REQUIRED


class TenantFacilityScopeMiddleware(MiddlewareMixin):
    """
    Rejects session-authenticated API requests whose scope headers are
    missing (400), malformed (400) or point at a facility the user is not a
    member of (403). Token-authenticated requests reach DRF anonymous here
    and are checked by CookieOrHeaderJWTAuthentication instead.

    On success request.scope / tenant_id / facility_id are set.
    """

    def _reject(self, request, status_code: int, code: str, message: str) -> JsonResponse:
        body = build_error_envelope(request=request, code=code, message=message, details=None)
        return JsonResponse(body, status=status_code)

    def process_request(self, request):
        request.scope = None
        request.tenant_id = None
        request.facility_id = None

        policy = scope_policy(getattr(request, "path", "") or "")
        if policy == SKIP:
            return None

        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        try:
            scope = resolve_scope(request)
        except ValidationError as exc:
            return self._reject(request, 400, "validation_error", str(exc.detail["detail"]))

        if scope is None:
            if policy == OPTIONAL:
                return None
            return self._reject(request, 400, "validation_error", MISSING_SCOPE_MSG)

        from mp_core.iam.services import membership

        if not membership.is_user_member_of_facility(
            user_id=user.id, tenant_id=scope.tenant_id, facility_id=scope.facility_id
        ):
            logger.warning(
                "Scope rejected: user=%s tenant=%s facility=%s", user.id, scope.tenant_id, scope.facility_id
            )
            return self._reject(request, 403, "permission_denied", NOT_MEMBER_MSG)

        request.scope = scope
        request.tenant_id = scope.tenant_id
        request.facility_id = scope.facility_id
        return None
