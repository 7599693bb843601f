# mp_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from mp_core.facilities.models import Facility
from mp_core.tenants.models import Tenant


class Role(models.Model):
    """
    Tenant-scoped role attached to a facility membership.
    Codes mirror the auth Group names used for permissions (ADMIN, DOCTOR, ...).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="roles")

    name = models.CharField(max_length=128)
    code = models.SlugField(max_length=64)  # unique per tenant

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "iam_role"
        constraints = [
            models.UniqueConstraint(fields=["tenant", "code"], name="uq_role_tenant_code"),
        ]

    def __str__(self) -> str:
        return self.code


class UserProfile(models.Model):
    """
    Practice-side profile of a Django user: tenant anchor plus the doctor's
    professional and contact data.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="mp_profile")
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="user_profiles")
    is_active = models.BooleanField(default=True)

    phone = models.CharField(max_length=20, blank=True, default="")
    crm = models.CharField(max_length=32, blank=True, default="")  # medical licence number
    specialty = models.CharField(max_length=120, blank=True, default="")
    clinic_name = models.CharField(max_length=255, blank=True, default="")
    clinic_address = models.CharField(max_length=500, blank=True, default="")
    avatar = models.URLField(max_length=500, blank=True, default="")

    timezone = models.CharField(max_length=64, default="America/Sao_Paulo")
    locale = models.CharField(max_length=10, default="pt-BR")

    notifications_enabled = models.BooleanField(default=True)
    whatsapp_enabled = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="profile_tenant_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user.username} ({self.tenant.code})"


class FacilityMembershipQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True, user_profile__is_active=True)

    def for_user(self, user_id: int):
        return self.filter(user_profile__user_id=user_id)


class FacilityMembership(models.Model):
    """
    Grants a user profile access to a facility with a role.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="facility_memberships")
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="memberships")

    user_profile = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="memberships")
    role = models.ForeignKey(Role, on_delete=models.PROTECT, related_name="memberships")

    is_primary = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    objects = FacilityMembershipQuerySet.as_manager()

    class Meta:
        db_table = "iam_facility_membership"
        constraints = [
            models.UniqueConstraint(
                fields=["facility", "user_profile"],
                name="uq_facility_user_profile_membership",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "facility"], name="membership_tenant_fac_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_profile_id} @ {self.facility_id} ({self.role_id})"
