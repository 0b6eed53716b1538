"""
Alfa Report Generation Service

Generates the monthly "rapportino alfa" timesheet from an uploaded Excel
workbook. Reads dated rows from the first worksheet, keeps the ones falling in
the requested month, and writes them into the fixed Excel template together
with the employee name and the reporting period.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from io import BytesIO
from pathlib import Path
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from core.config import TEMPLATE_FILE_NAME, TEMPLATES_DIR


# =============================================================================
# ERRORS
# =============================================================================


class ReportError(Exception):
    """Base class for report generation failures."""


class NoFileProvidedError(ReportError, ValueError):
    """Upload is missing or empty."""


class InvalidWorkbookError(ReportError, ValueError):
    """Upload is not a readable xlsx workbook."""


class NoMatchingDataError(ReportError, ValueError):
    """No rows fall in the requested month/year."""


class MalformedUploadError(ReportError, ValueError):
    """Upload rows don't carry the columns the template mapping reads."""


class TemplateMissingError(ReportError, FileNotFoundError):
    """Report template is not on disk."""


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class ExtractedRow:
    """A dated upload row. Field i comes from upload column i + 2."""

    date: date
    fields: tuple[str, ...]


@dataclass
class GeneratedReport:
    """Serialized report ready to be sent or written to disk."""

    content: bytes
    file_name: str
    row_count: int


# =============================================================================
# CONSTANTS
# =============================================================================

TEMPLATE_PATH = TEMPLATES_DIR / TEMPLATE_FILE_NAME

# Upload layout
UPLOAD_DATE_COLUMN = 1

# Template cells (1-indexed for Excel)
TEMPLATE_STRUCTURE = {
    "period_cell": "B4",
    "employee_cell": "B5",
    "end_of_month_cell": "B45",
    "start_row": 8,
    "date_col": 1,
    "note_col": 2,
    "hours_col": 3,
    "remote_work_col": 4,
}

# Upload field index (date column excluded) -> meaning
NOTE_FIELD = 6
HOURS_FIELD = 3
REMOTE_WORK_FIELD = 5
REQUIRED_FIELD_COUNT = max(NOTE_FIELD, HOURS_FIELD, REMOTE_WORK_FIELD) + 1

OFFICE_LOCATION = "ufficio"
REMOTE_WORK_FLAG = 1

MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 60

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# it-IT textual date formats, most common first
IT_DATE_FORMATS = [
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d-%m-%y",
    "%d.%m.%Y",
    "%d.%m.%y",
    "%Y-%m-%d",
]
IT_TIME_SUFFIXES = ["", " %H:%M:%S", " %H:%M", "T%H:%M:%S"]

ITALIAN_MONTHS = {
    "gennaio": 1, "febbraio": 2, "marzo": 3, "aprile": 4,
    "maggio": 5, "giugno": 6, "luglio": 7, "agosto": 8,
    "settembre": 9, "ottobre": 10, "novembre": 11, "dicembre": 12,
    "gen": 1, "feb": 2, "mar": 3, "apr": 4, "mag": 5, "giu": 6,
    "lug": 7, "ago": 8, "set": 9, "ott": 10, "nov": 11, "dic": 12,
}
ITALIAN_LONG_DATE = re.compile(r"^(\d{1,2})\s+([a-zà]+)\.?\s+(\d{4})$")

# Plain ASCII integers only: no "1_000", no non-ASCII digits
INTEGER_TEXT = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)


# =============================================================================
# CELL HELPERS
# =============================================================================


def format_date_it(d: date) -> str:
    """Format date as DD/MM/YYYY."""
    return d.strftime("%d/%m/%Y")


def cell_text(value) -> str:
    """Render a cell value the way it reads in the sheet."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return format_date_it(value)
        return value.strftime("%d/%m/%Y %H:%M:%S")
    if isinstance(value, date):
        return format_date_it(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_it_date(value) -> date | None:
    """
    Parse an it-IT date cell. Returns None for anything that isn't a date.

    Accepts native date cells, DD/MM/YYYY-style text (with '/', '-' or '.'
    separators and an optional time) and long forms like '3 febbraio 2024'.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    for date_format in IT_DATE_FORMATS:
        for time_suffix in IT_TIME_SUFFIXES:
            try:
                return datetime.strptime(text, date_format + time_suffix).date()
            except ValueError:
                continue

    match = ITALIAN_LONG_DATE.match(text.lower())
    if match:
        day, month_name, year = match.groups()
        month = ITALIAN_MONTHS.get(month_name)
        if month:
            try:
                return date(int(year), month, int(day))
            except ValueError:
                return None

    return None


def parse_hours(text) -> int:
    """Parse an hours cell as an integer; anything non-numeric counts as 0."""
    text = str(text)
    if not INTEGER_TEXT.fullmatch(text):
        return 0
    return int(text)


def is_remote_work(text) -> bool:
    """Every location other than the office counts as remote work."""
    return str(text or "").lower() != OFFICE_LOCATION


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def validate_period(month: int, year: int) -> None:
    """Month must be a calendar month; year is not range-checked."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month} (expected 1-12)")


# =============================================================================
# INPUT READING
# =============================================================================


def open_upload(content: bytes) -> Workbook:
    """
    Open uploaded workbook bytes.

    Raises:
        NoFileProvidedError: empty upload
        InvalidWorkbookError: not an xlsx workbook
    """
    if not content:
        raise NoFileProvidedError("Nessun file caricato.")
    try:
        return load_workbook(BytesIO(content), data_only=True)
    except (BadZipFile, InvalidFileException, KeyError) as e:
        raise InvalidWorkbookError("Uploaded file is not a valid Excel workbook") from e


def extract_rows(content: bytes, month: int, year: int) -> list[ExtractedRow]:
    """
    Read rows dated in (month, year) from the first worksheet of the upload.

    Column A holds the date; rows whose date doesn't parse (headers, blanks)
    are skipped. Every other column of a matching row is kept as text, in
    column order. Rows are returned in sheet order.
    """
    wb = open_upload(content)
    try:
        ws = wb.worksheets[0]
        rows = []
        for values in ws.iter_rows(
            min_row=1,
            max_row=ws.max_row,
            max_col=ws.max_column,
            values_only=True,
        ):
            row_date = parse_it_date(values[UPLOAD_DATE_COLUMN - 1])
            if row_date is None:
                continue
            if row_date.month != month or row_date.year != year:
                continue

            fields = tuple(
                cell_text(value)
                for col_idx, value in enumerate(values, start=1)
                if col_idx != UPLOAD_DATE_COLUMN
            )
            rows.append(ExtractedRow(date=row_date, fields=fields))
        return rows
    finally:
        wb.close()


def sort_by_date(rows: list[ExtractedRow]) -> list[ExtractedRow]:
    """Order rows by date; rows sharing a date keep their upload order."""
    return sorted(rows, key=lambda row: row.date)


# =============================================================================
# TEMPLATE POPULATION
# =============================================================================


def validate_rows(rows: list[ExtractedRow]) -> None:
    """
    Check rows before touching the template.

    Raises:
        NoMatchingDataError: no rows
        MalformedUploadError: a row is missing mapped columns
    """
    if not rows:
        raise NoMatchingDataError("Nessun dato da elaborare per il report.")

    short_rows = [row for row in rows if len(row.fields) < REQUIRED_FIELD_COUNT]
    if short_rows:
        raise MalformedUploadError(
            f"Upload must have at least {REQUIRED_FIELD_COUNT + 1} columns, "
            f"found {len(short_rows[0].fields) + 1} on row dated {format_date_it(short_rows[0].date)}"
        )


def load_template(template_path: Path) -> Workbook:
    """
    Load a fresh copy of the report template.

    Raises:
        TemplateMissingError: template file not on disk
    """
    if not template_path.exists():
        raise TemplateMissingError(f"Template Excel non trovato: {template_path}")
    return load_workbook(str(template_path))


def populate_header(ws, month: int, year: int, employee_name: str) -> None:
    """Fill period, employee and end-of-month cells."""
    ws[TEMPLATE_STRUCTURE["period_cell"]] = date(year, month, 1)
    ws[TEMPLATE_STRUCTURE["employee_cell"]] = employee_name
    ws[TEMPLATE_STRUCTURE["end_of_month_cell"]] = format_date_it(last_day_of_month(year, month))


def populate_row(ws, excel_row: int, row: ExtractedRow) -> None:
    """Write one upload row using the fixed field -> column mapping."""
    ws.cell(row=excel_row, column=TEMPLATE_STRUCTURE["date_col"], value=row.date)

    ws.cell(
        row=excel_row,
        column=TEMPLATE_STRUCTURE["note_col"],
        value=row.fields[NOTE_FIELD],
    )
    ws.cell(
        row=excel_row,
        column=TEMPLATE_STRUCTURE["hours_col"],
        value=parse_hours(row.fields[HOURS_FIELD]),
    )
    # Office days leave the template cell as it is
    if is_remote_work(row.fields[REMOTE_WORK_FIELD]):
        ws.cell(
            row=excel_row,
            column=TEMPLATE_STRUCTURE["remote_work_col"],
            value=REMOTE_WORK_FLAG,
        )


def autofit_columns(ws) -> None:
    """Size each column to its longest rendered value."""
    widths: dict[int, int] = {}
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is None:
                continue
            length = max(len(line) for line in cell_text(cell.value).splitlines() or [""])
            widths[cell.column] = max(widths.get(cell.column, 0), length)

    for col_idx, length in widths.items():
        width = min(max(length + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def populate_template(
    rows: list[ExtractedRow],
    month: int,
    year: int,
    employee_name: str,
    template_path: Path = TEMPLATE_PATH,
) -> Workbook:
    """
    Create the report workbook from the template.

    Rows are validated before the template is opened, so an empty month
    never reads or touches the template file.
    """
    validate_period(month, year)
    validate_rows(rows)

    wb = load_template(template_path)
    ws = wb.worksheets[0]

    populate_header(ws, month, year, employee_name)
    for offset, row in enumerate(rows):
        populate_row(ws, TEMPLATE_STRUCTURE["start_row"] + offset, row)

    autofit_columns(ws)
    return wb


# =============================================================================
# OUTPUT
# =============================================================================


def report_file_name(month: int, year: int) -> str:
    return f"rapportino_{month}_{year}.xlsx"


def serialize_report(wb: Workbook, month: int, year: int) -> tuple[bytes, str]:
    """Save the workbook to bytes and name the output file."""
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue(), report_file_name(month, year)


def generate_alfa_report(
    content: bytes,
    month: int,
    year: int,
    employee_name: str,
    template_path: Path = TEMPLATE_PATH,
) -> GeneratedReport:
    """
    Main entry point: upload bytes in, report bytes out.

    Raises:
        ValueError: invalid month
        NoFileProvidedError: empty upload
        InvalidWorkbookError: upload is not an xlsx workbook
        NoMatchingDataError: nothing dated in the requested month
        MalformedUploadError: too few columns in the upload
        TemplateMissingError: template file not found
    """
    validate_period(month, year)

    rows = sort_by_date(extract_rows(content, month, year))
    wb = populate_template(rows, month, year, employee_name, template_path)
    report_bytes, file_name = serialize_report(wb, month, year)

    return GeneratedReport(
        content=report_bytes,
        file_name=file_name,
        row_count=len(rows),
    )
