"""
Users Backend — User Service (Data Access)
===========================================

What:  All SQL issued against the users table.
Why:   Keeps persistence out of the route handlers; handlers receive a
       UserService bound to their own request-scoped session.
How:   SQLAlchemy constructs (select/insert/update/delete) compile to
       parameterized statements; rows are mapped to UserResponse.
Who:   Injected into routes via Depends(get_user_service).

Error Handling Strategy:
    Every statement is wrapped: any exception from SQLAlchemy or the driver
    is logged with its type and re-raised as DatabaseError carrying the
    operation's client-facing message. The session dependency then rolls
    back and the global handler answers 500.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.database import get_db_session
from app.exceptions import DatabaseError
from app.models.user import User
from app.schemas.user import UserPayload, UserResponse

logger = logging.getLogger(__name__)

# Range of a signed 64-bit integer, the widest value a BIGINT bind accepts
MAX_SQL_INT = 2**63 - 1
MIN_SQL_INT = -(2**63)


class UserService:
    """
    Data access for the users table, bound to one AsyncSession.

    Responsibilities:
        - list_users():  paginated, optionally filtered page + total count
        - create_user(): INSERT with zero-value defaults
        - update_user(): full replace keyed by id (no-op on unknown id)
        - delete_user(): DELETE keyed by id (no-op on unknown id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _search_filter(search: str) -> Optional[ColumnElement[bool]]:
        """
        Case-insensitive substring match on name OR email.

        ILIKE on PostgreSQL; SQLAlchemy renders lower() LIKE lower() elsewhere.
        Wildcards typed by the client are not escaped.
        """
        if not search:
            return None
        pattern = f"%{search}%"
        return or_(User.name.ilike(pattern), User.email.ilike(pattern))

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
    ) -> Tuple[List[UserResponse], int]:
        """
        Fetch one page of users and the total number of matching rows.

        Query plan:
            SELECT ... FROM users [WHERE name ILIKE :p OR email ILIKE :p]
            ORDER BY id LIMIT :limit OFFSET :offset
            SELECT count(*) FROM users [WHERE ...same filter...]

        Args:
            page:   1-based page number (already sanitized by the route)
            limit:  page size (already sanitized by the route)
            search: free text; empty means no filter

        Returns:
            (users on the page ordered by id, count ignoring pagination)

        Raises:
            DatabaseError: "Failed to fetch users" / "Failed to count users"
        """
        # Pages far past the end would overflow the OFFSET bind; they are empty anyway
        offset = min((page - 1) * limit, MAX_SQL_INT)
        condition = self._search_filter(search)

        query = select(User)
        count_query = select(func.count()).select_from(User)
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)
        query = query.order_by(User.id).limit(limit).offset(offset)

        try:
            result = await self.db.execute(query)
            rows = result.scalars().all()
        except Exception as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch users",
                context={"error_type": type(e).__name__, "page": page, "limit": limit},
            )

        try:
            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0
        except Exception as e:
            logger.error("Database error counting users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to count users",
                context={"error_type": type(e).__name__},
            )

        users = [UserResponse.model_validate(row) for row in rows]
        return users, total_count

    async def create_user(self, payload: UserPayload) -> None:
        """
        Insert one user. The id is assigned by the database and not returned.

        Raises:
            DatabaseError: "Failed to create user"
        """
        try:
            await self.db.execute(
                insert(User).values(
                    name=payload.name,
                    email=payload.email,
                    age=payload.age,
                )
            )
        except Exception as e:
            logger.error("Error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create user",
                context={"error_type": type(e).__name__},
            )
        logger.info("User created")

    async def update_user(self, user_id: int, payload: UserPayload) -> int:
        """
        Overwrite name, email and age of the user with this id.

        Returns:
            Number of rows affected (0 when the id is unknown; not an error).

        Raises:
            DatabaseError: "Failed to update user"
        """
        try:
            result = await self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(name=payload.name, email=payload.email, age=payload.age)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error("Error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update user",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )
        if result.rowcount == 0:
            logger.info("Update of user %s matched no rows", user_id)
        return result.rowcount

    async def delete_user(self, user_id: int) -> int:
        """
        Delete the user with this id.

        Returns:
            Number of rows affected (0 when the id is unknown; not an error).

        Raises:
            DatabaseError: "Failed to delete user"
        """
        try:
            result = await self.db.execute(
                delete(User)
                .where(User.id == user_id)
                .execution_options(synchronize_session=False)
            )
        except Exception as e:
            logger.error("Error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete user",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )
        if result.rowcount == 0:
            logger.info("Delete of user %s matched no rows", user_id)
        return result.rowcount


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    """FastAPI dependency: a UserService bound to the request's session."""
    return UserService(db)
