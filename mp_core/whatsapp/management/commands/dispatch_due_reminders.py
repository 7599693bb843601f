# mp_core/whatsapp/management/commands/dispatch_due_reminders.py
from __future__ import annotations

from django.core.management.base import BaseCommand

from mp_core.whatsapp.services import ReminderService


class Command(BaseCommand):
    help = "Queue WhatsApp messages for every scheduled reminder that is due."

    def add_arguments(self, parser):
        parser.add_argument("--tenant-id", type=str, default=None, help="Optional tenant UUID filter.")
        parser.add_argument("--facility-id", type=str, default=None, help="Optional facility UUID filter.")

    def handle(self, *args, **opts):
        dispatched = ReminderService.dispatch_due(tenant_id=opts["tenant_id"], facility_id=opts["facility_id"])
        self.stdout.write(self.style.SUCCESS(f"Reminders dispatched: {len(dispatched)}"))
