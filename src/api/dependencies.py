"""FastAPI dependencies for authentication and shared resources."""

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import jwt
from fastapi import Depends, HTTPException, Request, status

from api.models.responses import ErrorCodes
from core.config import JWT_COOKIE_NAME
from core.database import get_connection, get_user
from core.security import TokenConfigurationError, decode_access_token
from models.users import User
from services.alfa_report import TEMPLATE_PATH


def error_detail(error: str, code: str, details: list[str] | None = None) -> dict:
    """Build the standard error payload used in HTTPException.detail."""
    return {"error": error, "code": code, "details": details or []}


def get_db() -> Iterator[sqlite3.Connection]:
    """Open a SQLite connection for the duration of one request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def get_token(request: Request) -> str | None:
    """Read the session token from the cookie, falling back to a Bearer header."""
    token = request.cookies.get(JWT_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_claims(request: Request) -> dict:
    """
    Validate the session token.

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid
    """
    token = get_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("Not authenticated", ErrorCodes.UNAUTHORIZED),
        )

    try:
        claims = decode_access_token(token)
    except TokenConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail(str(e), ErrorCodes.INTERNAL_ERROR),
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("Invalid token.", ErrorCodes.UNAUTHORIZED),
        )

    if not str(claims.get("sub", "")).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("Invalid token.", ErrorCodes.UNAUTHORIZED),
        )
    return claims


async def get_current_user(
    claims: dict = Depends(get_current_claims),
    conn: sqlite3.Connection = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from the database.

    Raises:
        HTTPException: 401 if the user in the token no longer exists
    """
    user = get_user(conn, int(claims["sub"]))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_detail("User not found.", ErrorCodes.UNAUTHORIZED),
        )
    return user


def get_template_path() -> Path:
    """Location of the report template, resolved per request."""
    return TEMPLATE_PATH
