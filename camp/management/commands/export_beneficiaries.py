"""
Django management command to write the beneficiary Excel export to a file.

Usage:
    python manage.py export_beneficiaries --start 2026-11-01 --end 2026-11-30
    python manage.py export_beneficiaries --output camp.xlsx
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from camp.services.export_service import ExportService


def _parse_date(value, option):
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CommandError(f"--{option} must be a date in YYYY-MM-DD format, got {value!r}")


class Command(BaseCommand):
    help = "Export beneficiaries within a camp date range to an Excel workbook"

    def add_arguments(self, parser):
        parser.add_argument("--start", help="First camp date to include (YYYY-MM-DD)")
        parser.add_argument("--end", help="Last camp date to include (YYYY-MM-DD)")
        parser.add_argument("--output", help="File to write (defaults to the export file name)")

    def handle(self, *args, **options):
        start = _parse_date(options.get("start"), "start")
        end = _parse_date(options.get("end"), "end")
        if start and end and start > end:
            raise CommandError("--start must not be after --end")

        service = ExportService()
        output = options.get("output") or service.export_filename(start, end)
        with open(output, "wb") as handle:
            handle.write(service.export_workbook(start, end))

        self.stdout.write(self.style.SUCCESS(f"Wrote {output}"))
