"""
Users Backend — User Service Unit Tests
========================================

What:  Tests for UserService statements (list, create, update, delete).
How:   Happy paths run against a temporary SQLite database; failure paths
       use a mock session whose execute() raises.

What we test:
    ✅ Pagination returns at most `limit` rows ordered by id
    ✅ totalCount ignores pagination and follows the search filter
    ✅ Search is case-insensitive over name and email
    ✅ Create stores zero values for missing fields
    ✅ Update/delete on unknown ids affect zero rows without raising
    ✅ Driver errors become DatabaseError with the operation's message
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError
from app.models.user import User
from app.schemas.user import UserPayload
from app.services.user_service import UserService


def _driver_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestListUsers:
    """Tests for list_users pagination and search."""

    @pytest.mark.asyncio
    async def test_first_page(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(page=1, limit=4)

        assert [u.id for u in users] == [1, 2, 3, 4]
        assert total == len(seed_users)

    @pytest.mark.asyncio
    async def test_last_partial_page(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(page=2, limit=4)

        assert [u.id for u in users] == [5, 6]
        assert total == 6

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(page=10, limit=4)

        assert users == []
        assert total == 6

    @pytest.mark.asyncio
    async def test_offset_beyond_64_bits_is_empty(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(page=2**63 - 1, limit=10)

        assert users == []
        assert total == 6

    @pytest.mark.asyncio
    async def test_repeated_reads_are_stable(self, db_session, seed_users):
        service = UserService(db_session)
        first, _ = await service.list_users(page=2, limit=2)
        second, _ = await service.list_users(page=2, limit=2)

        assert first == second
        assert [u.id for u in first] == [3, 4]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(search="ALI")

        # "Alice Smith" by name and email, "Malice Green" by name
        assert [u.name for u in users] == ["Alice Smith", "Malice Green"]
        assert total == 2

    @pytest.mark.asyncio
    async def test_search_matches_email(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(search="sample.net")

        assert [u.email for u in users] == ["eve@sample.net", "mg@sample.net"]
        assert total == 2

    @pytest.mark.asyncio
    async def test_search_count_ignores_pagination(self, db_session, seed_users):
        users, total = await UserService(db_session).list_users(
            page=2, limit=2, search="example"
        )

        assert [u.id for u in users] == [3, 4]
        assert total == 4

    @pytest.mark.asyncio
    async def test_empty_table(self, db_session):
        users, total = await UserService(db_session).list_users()

        assert users == []
        assert total == 0

    @pytest.mark.asyncio
    async def test_fetch_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = _driver_error()

        with pytest.raises(DatabaseError) as exc_info:
            await UserService(mock_db_session).list_users()

        assert exc_info.value.message == "Failed to fetch users"

    @pytest.mark.asyncio
    async def test_count_failure(self, mock_db_session):
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.side_effect = [rows_result, _driver_error()]

        with pytest.raises(DatabaseError) as exc_info:
            await UserService(mock_db_session).list_users(search="bob")

        assert exc_info.value.message == "Failed to count users"


class TestWriteUsers:
    """Tests for create, update and delete."""

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, db_session):
        service = UserService(db_session)
        await service.create_user(UserPayload(name="Bob", email="bob@x.com", age=30))
        await db_session.commit()

        users, total = await service.list_users()
        assert total == 1
        assert users[0].id == 1
        assert (users[0].name, users[0].email, users[0].age) == ("Bob", "bob@x.com", 30)

    @pytest.mark.asyncio
    async def test_create_with_defaults(self, db_session):
        service = UserService(db_session)
        await service.create_user(UserPayload())
        await db_session.commit()

        users, _ = await service.list_users()
        assert (users[0].name, users[0].email, users[0].age) == ("", "", 0)

    @pytest.mark.asyncio
    async def test_update_replaces_all_fields(self, db_session, seed_users):
        service = UserService(db_session)
        affected = await service.update_user(2, UserPayload(name="Robert"))
        await db_session.commit()

        row = (await db_session.execute(select(User).where(User.id == 2))).scalar_one()
        assert affected == 1
        assert (row.name, row.email, row.age) == ("Robert", "", 0)

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, db_session, seed_users):
        affected = await UserService(db_session).update_user(999999, UserPayload(name="X"))

        assert affected == 0

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, db_session, seed_users):
        service = UserService(db_session)

        assert await service.delete_user(3) == 1
        assert await service.delete_user(3) == 0
        await db_session.commit()

        _, total = await service.list_users()
        assert total == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, message",
        [
            ("create", "Failed to create user"),
            ("update", "Failed to update user"),
            ("delete", "Failed to delete user"),
        ],
    )
    async def test_write_failures(self, mock_db_session, operation, message):
        mock_db_session.execute.side_effect = _driver_error()
        service = UserService(mock_db_session)

        with pytest.raises(DatabaseError) as exc_info:
            if operation == "create":
                await service.create_user(UserPayload())
            elif operation == "update":
                await service.update_user(1, UserPayload())
            else:
                await service.delete_user(1)

        assert exc_info.value.message == message
        assert exc_info.value.context["error_type"] == "OperationalError"
