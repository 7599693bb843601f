# mp_core/common/api/exceptions.py
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Request id for the error envelope: the client's X-Request-Id when sent,
    otherwise a fresh hex uuid. Cached on the request.
    """
    if request is None:
        return uuid.uuid4().hex

    rid = getattr(request, "request_id", None)
    if not rid:
        meta = getattr(request, "META", {}) or {}
        rid = meta.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex
        request.request_id = rid
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


class ConflictError(APIException):
    """
    409 Conflict that still flows through the global exception handler.
    Raised when the current state forbids the action (e.g. paying a paid bill).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


# first matching class wins
ERROR_CODES = (
    (ValidationError, "validation_error"),
    (NotAuthenticated, "not_authenticated"),
    (AuthenticationFailed, "not_authenticated"),
    (PermissionDenied, "permission_denied"),
    (NotFound, "not_found"),
    (Http404, "not_found"),
)


def _code_for(exc: Exception) -> str:
    for exc_class, code in ERROR_CODES:
        if isinstance(exc, exc_class):
            return code
    return getattr(exc, "default_code", None) or "api_error"


def _translate(exc: Exception) -> Exception:
    """
    Django-level exceptions raised from services/selectors -> DRF equivalents.
    """
    if isinstance(exc, ObjectDoesNotExist):
        return NotFound("Not found in this scope.")
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            return ValidationError(exc.message_dict)
        return ValidationError({"detail": " ".join(exc.messages)})
    return exc


def _split(data: Any) -> tuple[str, Any]:
    """
    (message, details) from a DRF error payload.

    {"detail": x, ...rest} -> (x, rest or None); [x, ...] -> (x, None);
    field errors -> ("Request failed.", data).
    """
    if isinstance(data, dict) and "detail" in data:
        detail = data["detail"]
        if isinstance(detail, list) and detail:
            detail = detail[0]
        rest = {k: v for k, v in data.items() if k != "detail"}
        return str(detail), rest or None
    if isinstance(data, list) and data:
        return str(data[0]), None
    return "Request failed.", data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    exc = _translate(exc)
    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("Unhandled API error (request_id=%s)", ensure_request_id(request), exc_info=exc)
        body = build_error_envelope(request=request, code="server_error", message="Unexpected server error.")
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    message, details = _split(response.data)
    code = _code_for(exc)

    if response.status_code >= 500:
        logger.error("API error %s code=%s request_id=%s", response.status_code, code, ensure_request_id(request))
    elif response.status_code != 404:
        logger.info("API error %s code=%s request_id=%s", response.status_code, code, ensure_request_id(request))

    body = build_error_envelope(request=request, code=code, message=message, details=details)
    return Response(body, status=response.status_code, headers=response.headers)
