import io
import logging

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from camp import stages
from camp.models import Beneficiary

logger = logging.getLogger(__name__)

# (header, column width)
EXPORT_COLUMNS = [
    ("Camp Date", 12),
    ("Registration Number", 20),
    ("Name", 25),
    ("Father's Name", 25),
    ("Date of Birth", 12),
    ("Age", 5),
    ("Address", 40),
    ("State", 15),
    ("Phone Number", 15),
    ("Aadhar Number", 15),
    ("Type of Aid", 20),
    ("Current Step", 15),
    ("Before Photo URL", 50),
    ("After Photo URL", 50),
    ("Registration Date", 15),
]

SHEET_TITLE = "Beneficiaries"


def _date(value):
    return value.strftime("%d/%m/%Y") if value else ""


class ExportService:
    """Builds the Excel workbook of beneficiaries for a camp date range."""

    def beneficiaries_in_range(self, start=None, end=None):
        queryset = Beneficiary.objects.all()
        if start and end:
            queryset = queryset.filter(camp_date__gte=start, camp_date__lte=end)
        return queryset.order_by("-camp_date", "event_id", "reg_number")

    def build_row(self, beneficiary) -> list:
        return [
            _date(beneficiary.camp_date),
            beneficiary.reg_number,
            beneficiary.name,
            beneficiary.father_name,
            _date(beneficiary.date_of_birth),
            beneficiary.age,
            beneficiary.address,
            beneficiary.state,
            beneficiary.phone_number,
            beneficiary.aadhar_number,
            beneficiary.type_of_aid_display or stages.format_type_of_aid(beneficiary.type_of_aid),
            stages.step_label(beneficiary.current_step),
            beneficiary.before_photo_url or "",
            beneficiary.after_photo_url or "",
            _date(timezone.localtime(beneficiary.created_at)),
        ]

    def export_workbook(self, start=None, end=None) -> bytes:
        """
        Render the beneficiaries with a camp date in ``[start, end]`` as .xlsx.

        Both bounds are inclusive; when either is missing no date filter is
        applied. Rows are ordered by camp date, newest first.
        """
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE
        sheet.append([header for header, _ in EXPORT_COLUMNS])
        for index, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        count = 0
        for beneficiary in self.beneficiaries_in_range(start, end):
            sheet.append(self.build_row(beneficiary))
            count += 1

        buffer = io.BytesIO()
        workbook.save(buffer)
        logger.info(f"Exported {count} beneficiaries ({start} to {end})")
        return buffer.getvalue()

    def export_filename(self, start=None, end=None) -> str:
        start_label = start.isoformat() if start else "all"
        end_label = end.isoformat() if end else "all"
        return f"limb-distribution-{start_label}-to-{end_label}.xlsx"
