"""Login, logout and current-user endpoints."""

import logging
import sqlite3
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import error_detail, get_current_claims, get_db
from api.models.responses import (
    ErrorCodes,
    LoginRequest,
    MessageResponse,
    UserProfileResponse,
)
from core.config import COOKIE_EXPIRATION_HOURS, IS_DEVELOPMENT, JWT_COOKIE_NAME
from core.database import get_user, get_user_by_email
from core.security import TokenConfigurationError, create_access_token, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

COOKIE_MAX_AGE_SECONDS = int(timedelta(hours=COOKIE_EXPIRATION_HOURS).total_seconds())


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_detail(message, ErrorCodes.UNAUTHORIZED),
    )


@router.post("/login", response_model=MessageResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Check credentials and set the session cookie."""
    if not payload.email.strip() or not payload.password.strip():
        logger.warning("Failed login attempt: missing email or password")
        raise _unauthorized("Email and password are required.")

    user = get_user_by_email(conn, payload.email)
    if user is None or not verify_password(payload.password, user["password"]):
        logger.warning("Failed login attempt for email: %s", payload.email)
        raise _unauthorized("Invalid credentials.")

    try:
        token = create_access_token(user["id"], user["email"], user["is_admin"])
    except TokenConfigurationError as e:
        logger.error("Error during login for email %s: %s", payload.email, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail(str(e), ErrorCodes.INTERNAL_ERROR),
        )

    response.set_cookie(
        key=JWT_COOKIE_NAME,
        value=token,
        max_age=COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        secure=not IS_DEVELOPMENT,
        samesite="strict",
    )
    logger.info("User %s logged in successfully", user["email"])
    return MessageResponse(message="Login successful.")


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    claims: dict = Depends(get_current_claims),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Return the profile of the authenticated user."""
    user = get_user(conn, int(claims["sub"]))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("User not found.", ErrorCodes.NOT_FOUND),
        )

    return UserProfileResponse(
        id=user["id"],
        first_name=user["first_name"],
        last_name=user["last_name"],
        email=user["email"],
        is_admin=user["is_admin"],
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(
        key=JWT_COOKIE_NAME,
        httponly=True,
        secure=not IS_DEVELOPMENT,
        samesite="strict",
    )
    logger.info("User logged out successfully")
    return MessageResponse(message="Logged out successfully.")
