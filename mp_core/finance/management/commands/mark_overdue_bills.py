# mp_core/finance/management/commands/mark_overdue_bills.py
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from mp_core.finance.services import BillService


class Command(BaseCommand):
    help = "Mark pending bills whose due date has passed as overdue."

    def add_arguments(self, parser):
        parser.add_argument("--today", type=str, default=None, help="Reference date (YYYY-MM-DD). Defaults to today.")
        parser.add_argument("--tenant-id", type=str, default=None, help="Optional tenant UUID filter.")

    def handle(self, *args, **opts):
        today = None
        if opts["today"]:
            today = parse_date(opts["today"])
            if today is None:
                raise CommandError("--today must be YYYY-MM-DD")

        count = BillService.mark_overdue_bills(today=today, tenant_id=opts["tenant_id"])
        self.stdout.write(self.style.SUCCESS(f"Bills marked overdue: {count}"))
