# assets/management/commands/run_depreciation.py

from __future__ import annotations

import calendar
from datetime import datetime

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from accounting.services.exceptions import AccountingServiceError
from assets.services.depreciation_service import calculate_monthly_depreciation


def _parse_date(s: str | None):
    if not s:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


class Command(BaseCommand):
    help = "Post the monthly straight-line depreciation for every qualifying asset (idempotent per period)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--as-of",
            dest="as_of",
            help="Depreciation date YYYY-MM-DD (defaults to the last day of the current month)",
        )

    def handle(self, *args, **options):
        as_of = _parse_date(options.get("as_of"))
        if options.get("as_of") and not as_of:
            raise CommandError("Invalid --as-of date. Use YYYY-MM-DD")

        if as_of is None:
            today = timezone.localdate()
            as_of = today.replace(day=calendar.monthrange(today.year, today.month)[1])

        try:
            records = calculate_monthly_depreciation(as_of)
        except AccountingServiceError as exc:
            raise CommandError(str(exc)) from exc

        if not records:
            self.stdout.write(self.style.WARNING(f"No assets to depreciate for {as_of:%Y-%m}"))
            return

        for record in records:
            self.stdout.write(f"  {record.asset.code}  {record.monthly_amount}")
        self.stdout.write(self.style.SUCCESS(f"Depreciated {len(records)} asset(s) for {as_of:%Y-%m}"))
