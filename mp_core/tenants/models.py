# mp_core/tenants/models.py
import uuid

from django.db import models

from mp_core.common.validators import digits_only, validate_cnpj


class TenantStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"
    SUSPENDED = "SUSPENDED", "Suspended"


class TenantQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=TenantStatus.ACTIVE)

    def for_user(self, user_id: int):
        return self.filter(user_profiles__user_id=user_id, user_profiles__is_active=True).distinct()


class Tenant(models.Model):
    """
    A medical practice: the doctor's office that owns patients and records.
    Every scoped row points back here; the tenant itself is unscoped.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64, unique=True)

    cnpj = models.CharField(max_length=18, blank=True, default="", validators=[validate_cnpj])
    contact_email = models.EmailField(blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=TenantStatus.choices,
        default=TenantStatus.ACTIVE,
        db_index=True,
    )
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantQuerySet.as_manager()

    class Meta:
        db_table = "tenants_tenant"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.cnpj = digits_only(self.cnpj)
        super().save(*args, **kwargs)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE
