"""Tests for user storage and request logging."""

import pytest

from api.logging import RequestLog, log_request
from core.database import (
    DuplicateEmailError,
    create_user,
    delete_user,
    get_user,
    get_user_by_email,
    init_database,
    list_users,
    seed_default_user,
    update_user,
)
from core.security import verify_password


def test_init_database_is_idempotent(db):
    init_database(db)
    init_database(db)

    tables = {row[0] for row in db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    assert {"users", "api_requests", "api_request_details"} <= tables


def test_create_and_fetch_user(db, anna):
    assert get_user(db, anna["id"]) == anna
    assert get_user_by_email(db, "anna.rossi@example.com") == anna
    assert anna["is_admin"] is False
    assert anna["created_at"] == anna["updated_at"]


def test_create_user_duplicate_email(db, anna):
    with pytest.raises(DuplicateEmailError):
        create_user(
            db,
            first_name="Altra",
            last_name="Anna",
            username="anna2",
            email=anna["email"],
            password_hash="x",
        )


def test_update_user(db, anna):
    assert update_user(db, anna["id"], first_name="Anna", last_name="Neri", email="anna.neri@example.com")

    user = get_user(db, anna["id"])
    assert user["last_name"] == "Neri"
    assert user["email"] == "anna.neri@example.com"
    assert user["password"] == anna["password"]


def test_update_missing_user(db):
    assert update_user(db, 42, first_name="", last_name="", email="x@example.com") is False


def test_update_user_to_taken_email(db, anna):
    other = create_user(
        db,
        first_name="Marco",
        last_name="Bianchi",
        username="mbianchi",
        email="marco@example.com",
        password_hash="x",
    )

    with pytest.raises(DuplicateEmailError):
        update_user(db, other["id"], first_name="Marco", last_name="Bianchi", email=anna["email"])


def test_delete_user(db, anna):
    assert delete_user(db, anna["id"]) is True
    assert delete_user(db, anna["id"]) is False
    assert list_users(db) == []


def test_seed_default_user_once(db):
    kwargs = {"email": "admin@example.com", "password": "admin", "first_name": "Admin", "last_name": "", "username": "admin"}

    assert seed_default_user(db, **kwargs) is True
    assert seed_default_user(db, **kwargs) is False

    users = list_users(db)
    assert len(users) == 1
    assert users[0]["is_admin"] is True
    assert verify_password("admin", users[0]["password"])


@pytest.mark.parametrize("email, password", [("", "admin"), ("admin@example.com", ""), ("  ", "  ")])
def test_seed_default_user_requires_configuration(db, email, password):
    with pytest.raises(ValueError):
        seed_default_user(db, email=email, password=password)


def test_log_request_with_details(db):
    log = RequestLog(
        endpoint="/api/tempestive/alfasReports",
        method="POST",
        month=2,
        year=2024,
        status_code=422,
        error_code="VALIDATION_ERROR",
        details=[("validation_error", "Upload must have at least 8 columns")],
    )

    log_request(db, log)

    row = db.execute(
        "SELECT endpoint, status_code, error_code FROM api_requests WHERE request_id = ?",
        (log.request_id,),
    ).fetchone()
    assert tuple(row) == ("/api/tempestive/alfasReports", 422, "VALIDATION_ERROR")
    details = db.execute(
        "SELECT detail_type, message FROM api_request_details WHERE request_id = ?",
        (log.request_id,),
    ).fetchall()
    assert [tuple(d) for d in details] == [("validation_error", "Upload must have at least 8 columns")]
