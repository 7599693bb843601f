from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand, CommandError

from mp_core.common.permissions import (
    ROLE_ADMIN,
    ROLE_BILLING,
    ROLE_DOCTOR,
    ROLE_NURSE,
    ROLE_READONLY,
    ROLE_SECRETARY,
)
from mp_core.iam.models import Role
from mp_core.tenants.models import Tenant

ROLE_LABELS = {
    ROLE_ADMIN: "Administrator",
    ROLE_DOCTOR: "Doctor",
    ROLE_NURSE: "Nurse",
    ROLE_SECRETARY: "Secretary",
    ROLE_BILLING: "Billing",
    ROLE_READONLY: "Read only",
}


class Command(BaseCommand):
    help = "Create the role groups used for permissions and, with --tenant, the practice's Role rows."

    def add_arguments(self, parser):
        parser.add_argument("--tenant", help="Practice code whose membership roles should be created.")

    def handle(self, *args, **options):
        groups = sum(Group.objects.get_or_create(name=code)[1] for code in ROLE_LABELS)
        self.stdout.write(f"Groups created: {groups}")

        code = options.get("tenant")
        if code:
            try:
                tenant = Tenant.objects.get(code=code)
            except Tenant.DoesNotExist:
                raise CommandError(f"Unknown practice code: {code}")

            roles = sum(
                Role.objects.get_or_create(tenant=tenant, code=role.lower(), defaults={"name": label})[1]
                for role, label in ROLE_LABELS.items()
            )
            self.stdout.write(f"Roles created for {tenant.code}: {roles}")

        self.stdout.write(self.style.SUCCESS("Roles ensured."))
