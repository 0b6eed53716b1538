"""User CRUD endpoints."""

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from api.dependencies import error_detail, get_current_user, get_db
from api.models.responses import (
    ErrorCodes,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from core.database import (
    DuplicateEmailError,
    create_user,
    delete_user,
    get_user,
    list_users,
    update_user,
)
from core.security import hash_password
from models.users import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/user",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user["id"],
        first_name=user["first_name"],
        last_name=user["last_name"],
        username=user["username"],
        email=user["email"],
        is_admin=user["is_admin"],
        created_at=user["created_at"],
        updated_at=user["updated_at"],
    )


def _not_found(user_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_detail("User not found.", ErrorCodes.NOT_FOUND, [f"id: {user_id}"]),
    )


def _conflict(e: DuplicateEmailError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=error_detail("Email already in use.", ErrorCodes.CONFLICT, [str(e)]),
    )


@router.get("", response_model=list[UserResponse])
async def get_users(conn: sqlite3.Connection = Depends(get_db)):
    return [to_response(user) for user in list_users(conn)]


@router.get("/{user_id}", response_model=UserResponse, name="get_user")
async def get_user_endpoint(user_id: int, conn: sqlite3.Connection = Depends(get_db)):
    user = get_user(conn, user_id)
    if user is None:
        raise _not_found(user_id)
    return to_response(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    payload: UserCreateRequest,
    request: Request,
    response: Response,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Create a user; the password is stored as a bcrypt hash."""
    if not payload.password.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail("Invalid user data.", ErrorCodes.INVALID_REQUEST, ["Password is required"]),
        )

    try:
        user = create_user(
            conn,
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            is_admin=payload.is_admin,
        )
    except DuplicateEmailError as e:
        raise _conflict(e)

    logger.info("Created user %s (id %s)", user["email"], user["id"])
    response.headers["Location"] = str(request.url_for("get_user", user_id=user["id"]))
    return to_response(user)


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user_endpoint(
    user_id: int,
    payload: UserUpdateRequest,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Update name and email. Password and role are not editable here."""
    try:
        updated = update_user(
            conn,
            user_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
        )
    except DuplicateEmailError as e:
        raise _conflict(e)

    if not updated:
        raise _not_found(user_id)

    logger.info("Updated user id %s", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_endpoint(user_id: int, conn: sqlite3.Connection = Depends(get_db)):
    if not delete_user(conn, user_id):
        raise _not_found(user_id)

    logger.info("Deleted user id %s", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
