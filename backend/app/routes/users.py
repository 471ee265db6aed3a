"""
Users Backend — Users Route Handlers
=====================================

What:  GET/POST /users and PUT/DELETE /users/{user_id}.
How:   Parses query/path/body input, delegates to UserService, shapes JSON.
Who:   Called by the frontend user table (list, add, edit, delete).

Input policy:
    - page/limit are read as raw strings and never rejected: anything that
      is not a positive integer falls back to the default (1 and 10).
    - Bodies are parsed into UserPayload by FastAPI; undecodable JSON is
      turned into a 400 by the RequestValidationError handler in main.py.
    - Path ids must be integers; anything else is a 400 before any SQL runs.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.exceptions import ValidationError
from app.schemas.user import (
    ErrorResponse,
    MessageResponse,
    UserListResponse,
    UserPayload,
)
from app.services.user_service import MAX_SQL_INT, MIN_SQL_INT, UserService, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _parse_int(raw: Optional[str]) -> Optional[int]:
    """Optional sign plus ASCII digits, within 64-bit range; None otherwise."""
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return None
    value = int(raw)
    if not MIN_SQL_INT <= value <= MAX_SQL_INT:
        return None
    return value


def parse_positive_int(raw: Optional[str], default: int) -> int:
    """Parse a query value as a positive integer, or return the default."""
    value = _parse_int(raw)
    if value is None or value < 1:
        return default
    return value


def parse_user_id(raw: str) -> int:
    """Parse the {user_id} path segment, raising ValidationError (400) if not an integer."""
    value = _parse_int(raw)
    if value is None:
        raise ValidationError(message="Invalid user id", field="id", context={"value": raw})
    return value


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List users with pagination and search",
)
async def list_users(
    page: Optional[str] = Query(default=None, description="1-based page number (default 1)"),
    limit: Optional[str] = Query(default=None, description="Page size (default 10)"),
    search: str = Query(default="", description="Case-insensitive substring of name or email"),
    service: UserService = Depends(get_user_service),
) -> UserListResponse:
    """
    Return one page of users ordered by id, plus totalCount for the filter.

    Example:
        GET /users?page=2&limit=5&search=ali
        → {"users": [...], "totalCount": 7}
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, DEFAULT_LIMIT)

    users, total_count = await service.list_users(
        page=page_number,
        limit=page_size,
        search=search,
    )
    return UserListResponse(users=users, total_count=total_count)


@router.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses={
        400: {"description": "Malformed request body", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """
    Insert a user. The new id is not returned; clients re-fetch the list.
    """
    await service.create_user(payload)
    return MessageResponse(message="User created successfully")


@router.put(
    "/users/{user_id}",
    responses={
        200: {"description": "Applied (also when no user has this id)"},
        400: {"description": "Malformed body or non-numeric id", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Replace a user's name, email and age",
)
async def update_user(
    user_id: str,
    payload: UserPayload,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Full replace of the stored fields. Unknown ids are a silent no-op."""
    await service.update_user(parse_user_id(user_id), payload)
    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    "/users/{user_id}",
    responses={
        200: {"description": "Applied (also when no user has this id)"},
        400: {"description": "Non-numeric id", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Remove the user. Deleting an unknown or already-deleted id succeeds."""
    await service.delete_user(parse_user_id(user_id))
    return Response(status_code=status.HTTP_200_OK)
