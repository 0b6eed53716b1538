"""
SQLite database operations for users and API request logs.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from core.config import (
    DB_PATH,
    DEFAULT_USER_EMAIL,
    DEFAULT_USER_FIRST_NAME,
    DEFAULT_USER_LAST_NAME,
    DEFAULT_USER_PASSWORD,
    DEFAULT_USER_USERNAME,
)
from core.security import hash_password
from models.users import User

USER_COLUMNS = (
    "id, first_name, last_name, username, email, password, "
    "is_admin, created_at, updated_at"
)


class DuplicateEmailError(ValueError):
    """Raised when a user with the same email already exists."""


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Get a database connection."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # FastAPI may open and use a request's connection on different threads
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist."""
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL DEFAULT '',
            last_name TEXT NOT NULL DEFAULT '',
            username TEXT NOT NULL DEFAULT '',
            email TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL,
            is_admin INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)

    # API request logging table
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            user_id INTEGER,
            file_size_bytes INTEGER,
            file_name TEXT,
            month INTEGER,
            year INTEGER,
            status_code INTEGER NOT NULL,
            error_code TEXT,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL,
            rows_written INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)"
    )

    conn.commit()


# =============================================================================
# USERS
# =============================================================================


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        username=row["username"],
        email=row["email"],
        password=row["password"],
        is_admin=bool(row["is_admin"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def list_users(conn: sqlite3.Connection) -> list[User]:
    """Return all users ordered by id."""
    rows = conn.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY id").fetchall()
    return [_row_to_user(row) for row in rows]


def get_user(conn: sqlite3.Connection, user_id: int) -> User | None:
    row = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
    ).fetchone()
    return _row_to_user(row) if row else None


def get_user_by_email(conn: sqlite3.Connection, email: str) -> User | None:
    row = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE email = ?", (email,)
    ).fetchone()
    return _row_to_user(row) if row else None


def create_user(
    conn: sqlite3.Connection,
    *,
    first_name: str,
    last_name: str,
    username: str,
    email: str,
    password_hash: str,
    is_admin: bool = False,
) -> User:
    """
    Insert a user and return the stored record.

    Raises:
        DuplicateEmailError: email already registered
    """
    now = _utc_now()
    try:
        cursor = conn.execute(
            """
            INSERT INTO users (
                first_name, last_name, username, email, password,
                is_admin, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (first_name, last_name, username, email, password_hash, int(is_admin), now, now),
        )
    except sqlite3.IntegrityError as e:
        raise DuplicateEmailError(f"Email already registered: {email}") from e
    conn.commit()
    return get_user(conn, cursor.lastrowid)


def update_user(
    conn: sqlite3.Connection,
    user_id: int,
    *,
    first_name: str,
    last_name: str,
    email: str,
) -> bool:
    """
    Update name and email of a user. Returns False if the user doesn't exist.

    Raises:
        DuplicateEmailError: email belongs to another user
    """
    try:
        cursor = conn.execute(
            """
            UPDATE users
            SET first_name = ?, last_name = ?, email = ?, updated_at = ?
            WHERE id = ?
            """,
            (first_name, last_name, email, _utc_now(), user_id),
        )
    except sqlite3.IntegrityError as e:
        raise DuplicateEmailError(f"Email already registered: {email}") from e
    conn.commit()
    return cursor.rowcount > 0


def delete_user(conn: sqlite3.Connection, user_id: int) -> bool:
    """Delete a user. Returns False if the user doesn't exist."""
    cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
    conn.commit()
    return cursor.rowcount > 0


def seed_default_user(
    conn: sqlite3.Connection,
    *,
    email: str = DEFAULT_USER_EMAIL,
    password: str = DEFAULT_USER_PASSWORD,
    first_name: str = DEFAULT_USER_FIRST_NAME,
    last_name: str = DEFAULT_USER_LAST_NAME,
    username: str = DEFAULT_USER_USERNAME,
) -> bool:
    """
    Create the default admin user if it doesn't exist yet.

    Returns:
        True if the user was created, False if it was already present

    Raises:
        ValueError: email or password not configured
    """
    if not email.strip() or not password.strip():
        raise ValueError(
            "Default user configuration is invalid: "
            "DEFAULT_USER_EMAIL and DEFAULT_USER_PASSWORD are required"
        )

    if get_user_by_email(conn, email) is not None:
        return False

    create_user(
        conn,
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password_hash=hash_password(password),
        is_admin=True,
    )
    return True
