"""
Data models for dashboard users.

Rows coming out of SQLite are converted to TypedDicts; the API layer turns
them into Pydantic response models without the password hash.
"""

from typing import TypedDict


class User(TypedDict):
    """Stored user record."""
    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    password: str  # bcrypt hash
    is_admin: bool
    created_at: str
    updated_at: str


def display_name(user: User) -> str:
    """Name printed on generated reports."""
    return f"{user['first_name']} {user['last_name']}"
