from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mp_core.tenants.models import Tenant, TenantStatus

logger = logging.getLogger(__name__)


class TenantService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        name: str,
        code: str,
        cnpj: str = "",
        contact_email: str = "",
        status: str = TenantStatus.ACTIVE,
        metadata: dict | None = None,
    ) -> Tenant:
        try:
            with transaction.atomic():
                tenant = Tenant.objects.create(
                    name=name.strip(),
                    code=code.strip(),
                    cnpj=cnpj,
                    contact_email=contact_email,
                    status=status,
                    metadata=metadata or {},
                )
        except IntegrityError:
            raise ValidationError({"code": "Practice code already exists."})

        logger.info("Tenant created id=%s code=%s", tenant.id, tenant.code)
        return tenant

    @staticmethod
    @transaction.atomic
    def set_status(*, tenant_id: UUID, status: str) -> Tenant:
        tenant = Tenant.objects.select_for_update().get(id=tenant_id)
        if tenant.status == status:
            return tenant

        previous = tenant.status
        tenant.status = status
        tenant.save(update_fields=["status", "updated_at"])
        logger.info("Tenant status id=%s %s -> %s", tenant.id, previous, status)
        return tenant
