# mp_core/common/services.py
from __future__ import annotations

from typing import Iterable

from django.db import models


def apply_updates(instance: models.Model, data: dict, allowed: Iterable[str]) -> list[str]:
    """
    Copies allowed keys from data onto instance. Returns the changed field names.
    """
    changed: list[str] = []
    for field in allowed:
        if field not in data:
            continue
        value = data[field]
        if getattr(instance, field) != value:
            setattr(instance, field, value)
            changed.append(field)
    return changed
