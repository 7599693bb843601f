from __future__ import annotations

from datetime import date
from uuid import UUID

from django.utils.dateparse import parse_date
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import ValidationError as DRFValidationError

TRUTHY = {"1", "true", "True", "yes"}


def pk_uuid(pk) -> UUID:
    """
    Detail-route id. A malformed id cannot match any row, so it is a 404.
    """
    try:
        return UUID(str(pk))
    except ValueError:
        raise NotFound("Not found in this scope.")


def uuid_or_none(value: str | None, field_name: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        raise DRFValidationError({field_name: "Invalid UUID"})


def date_or_none(value: str | None, field_name: str) -> date | None:
    if not value:
        return None
    try:
        d = parse_date(str(value))
    except ValueError:
        d = None
    if d is None:
        raise DRFValidationError({field_name: "Invalid date. Use YYYY-MM-DD."})
    return d


def int_param(value: str | None, field_name: str, *, default: int, lo: int = 1, hi: int = 500) -> int:
    if value in (None, ""):
        return default
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid integer."})
    return max(lo, min(n, hi))


def flag(value: str | None) -> bool | None:
    """
    Tri-state query flag: None when absent, else truthy/falsy.
    """
    if value in (None, ""):
        return None
    return value in TRUTHY
