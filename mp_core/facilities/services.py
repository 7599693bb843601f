from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mp_core.common.services import apply_updates
from mp_core.facilities.models import Facility

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "facility_type",
    "timezone",
    "phone",
    "email",
    "address",
    "city",
    "state",
    "postal_code",
    "is_active",
)


class FacilityService:
    @staticmethod
    def create(*, tenant_id: UUID, name: str, code: str, **fields) -> Facility:
        facility = Facility(tenant_id=tenant_id, name=name.strip(), code=code.strip())
        apply_updates(facility, {k: v for k, v in fields.items() if v is not None}, EDITABLE_FIELDS)

        try:
            with transaction.atomic():
                facility.save()
        except IntegrityError:
            raise ValidationError({"code": "This practice already has a facility with that code."})

        logger.info("Facility created id=%s tenant=%s code=%s", facility.id, tenant_id, facility.code)
        return facility

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, facility_id: UUID, data: dict) -> Facility:
        facility = Facility.objects.select_for_update().get(tenant_id=tenant_id, id=facility_id)

        changed = apply_updates(facility, data or {}, EDITABLE_FIELDS)
        if changed:
            facility.save(update_fields=[*changed, "updated_at"])
            logger.info("Facility updated id=%s fields=%s", facility.id, changed)
        return facility
