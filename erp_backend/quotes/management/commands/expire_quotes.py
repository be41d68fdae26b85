# quotes/management/commands/expire_quotes.py

from __future__ import annotations

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from quotes.services.quote_service import expire_stale


class Command(BaseCommand):
    help = "Expire pending / in-review / approved quotes whose validity has ended."

    def add_arguments(self, parser):
        parser.add_argument("--as-of", dest="as_of", help="Reference date YYYY-MM-DD (defaults to today)")

    def handle(self, *args, **options):
        as_of = None
        if options.get("as_of"):
            try:
                as_of = datetime.strptime(options["as_of"], "%Y-%m-%d").date()
            except ValueError as exc:
                raise CommandError("Invalid --as-of date. Use YYYY-MM-DD") from exc

        count = expire_stale(as_of)
        self.stdout.write(self.style.SUCCESS(f"Expired {count} quote(s)"))
