"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook

# Settings read at import time by core.config
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ISSUER"] = "dashboard-tests"
os.environ["JWT_AUDIENCE"] = "dashboard-tests"

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import create_user, get_connection, init_database  # noqa: E402
from core.security import hash_password  # noqa: E402

UPLOAD_HEADERS = ["Data", "Cliente", "Progetto", "Attività", "Ore", "Tipo", "Sede", "Note"]


def upload_row(day, hours="8", location="Ufficio", note="", client="Alfa"):
    """One upload row in the 8-column timesheet layout."""
    return [day, client, "Dashboard", "Sviluppo", hours, "Ordinario", location, note]


def make_workbook_bytes(rows: list[list]) -> bytes:
    """Build an xlsx upload whose first sheet holds the given rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Timesheet"
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def build_template(path: Path, remote_work_prefill: dict[int, object] | None = None) -> Path:
    """Write a minimal rapportino template with the fixed header layout."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Rapportino"
    ws["A1"] = "Rapportino Alfa"
    ws["A4"] = "Periodo"
    ws["A5"] = "Dipendente"
    for col_idx, header in enumerate(["Data", "Note", "Ore", "Smart working"], start=1):
        ws.cell(row=7, column=col_idx, value=header)
    ws["A45"] = "Data firma"
    for row_idx, value in (remote_work_prefill or {}).items():
        ws.cell(row=row_idx, column=4, value=value)

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(path))
    return path


@pytest.fixture
def template_path(tmp_path):
    """Template written to a Templates directory under tmp_path."""
    return build_template(tmp_path / "Templates" / "rapportino_alfa.xlsx")


@pytest.fixture
def february_rows():
    """Upload rows: three in February 2024, out of order, plus noise."""
    return [
        UPLOAD_HEADERS,
        upload_row("15/02/2024", hours="7", location="Remoto", note="Smart working"),
        upload_row("31/01/2024", hours="8", location="Ufficio"),
        upload_row("28/02/2024", hours="abc", location="Casa", note="Chiusura mese"),
        upload_row(None),
        upload_row("03/02/2024", hours="8", location="Ufficio", note="Riunione"),
        upload_row("01/03/2024", hours="6", location="Remoto"),
        upload_row("15/02/2023", hours="4", location="Remoto"),
        ["Totale", None, None, None, "29"],
    ]


@pytest.fixture
def upload_bytes(february_rows):
    return make_workbook_bytes(february_rows)


@pytest.fixture
def db_path(tmp_path):
    """Path to an initialized SQLite database."""
    path = tmp_path / "db" / "dashboard.db"
    conn = get_connection(path)
    try:
        init_database(conn)
    finally:
        conn.close()
    return path


@pytest.fixture
def db(db_path):
    conn = get_connection(db_path)
    yield conn
    conn.close()


@pytest.fixture
def anna(db):
    """Regular user Anna Rossi with password 'segreta'."""
    return create_user(
        db,
        first_name="Anna",
        last_name="Rossi",
        username="arossi",
        email="anna.rossi@example.com",
        password_hash=hash_password("segreta"),
    )
