"""
Spreadsheet export of candidate lists (openpyxl)
"""
import logging
from datetime import date, datetime, timezone
from io import BytesIO
from typing import Dict, Iterable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from ..models import Candidate
from ..schemas.candidate import CandidateExportFilter

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Candidates"
COLUMN_PADDING = 2

# (header, attribute) in output order
EXPORT_COLUMNS = [
    ("Name", "name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("WeChat", "wechat"),
    ("Job Type", "job_type"),
    ("Current Company", "current_company"),
    ("School", "school"),
    ("LinkedIn", "linkedin_url"),
    ("Google Scholar", "google_scholar"),
    ("Status", "status"),
    ("Resume URL", "resume_url"),
    ("Created At", "created_at"),
    ("Updated At", "updated_at"),
]


def format_short_date(value: date, date_format: Optional[str] = None) -> str:
    """en-US short date (M/D/YYYY) unless an explicit strftime format is given."""
    if date_format:
        return value.strftime(date_format)
    return f"{value.month}/{value.day}/{value.year}"


def _cell_value(value, date_format: Optional[str]) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return format_short_date(value, date_format)
    if hasattr(value, "value"):  # enum members
        return str(value.value)
    return str(value)


def flatten_candidate(candidate: Candidate, date_format: Optional[str] = None) -> Dict[str, str]:
    return {
        header: _cell_value(getattr(candidate, attr), date_format)
        for header, attr in EXPORT_COLUMNS
    }


def _contains(haystack: Optional[str], needle: str) -> bool:
    return haystack is not None and needle.lower() in haystack.lower()


def filter_candidates(
    candidates: Iterable[Candidate],
    filters: Optional[CandidateExportFilter],
) -> List[Candidate]:
    """Substring match on name/company/school, exact match on job type/status."""
    candidates = list(candidates)
    if filters is None:
        return candidates

    selected = []
    for candidate in candidates:
        if filters.candidate_ids and candidate.id not in filters.candidate_ids:
            continue
        if filters.name and not _contains(candidate.name, filters.name):
            continue
        if filters.current_company and not _contains(candidate.current_company, filters.current_company):
            continue
        if filters.school and not _contains(candidate.school, filters.school):
            continue
        if filters.job_type and candidate.job_type != filters.job_type:
            continue
        if filters.status and candidate.status != filters.status:
            continue
        selected.append(candidate)
    return selected


def column_widths(rows: Sequence[Dict[str, str]]) -> List[int]:
    """Widest value per column, never narrower than its header, plus padding."""
    widths = []
    for header, _ in EXPORT_COLUMNS:
        widest = max([len(header)] + [len(row[header]) for row in rows])
        widths.append(widest + COLUMN_PADDING)
    return widths


def to_spreadsheet(
    candidates: Iterable[Candidate],
    filters: Optional[CandidateExportFilter] = None,
    date_format: Optional[str] = None,
) -> bytes:
    """Serialize candidates to an .xlsx workbook with a single sheet."""
    rows = [flatten_candidate(c, date_format) for c in filter_candidates(candidates, filters)]
    logger.debug(f"Formatted {len(rows)} candidates for spreadsheet export")

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append([header for header, _ in EXPORT_COLUMNS])
    for row in rows:
        sheet.append([row[header] for header, _ in EXPORT_COLUMNS])

    for index, width in enumerate(column_widths(rows), start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename(filtered: bool = False, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    if filtered:
        timestamp = now.strftime("%Y-%m-%dT%H-%M-%S")
        return f"candidates_filtered_export_{timestamp}.xlsx"
    return f"candidates-{now.date().isoformat()}.xlsx"
