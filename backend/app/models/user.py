"""
Users Backend — User SQLAlchemy Model
======================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for CRUD statements and by Alembic for schema management.

Table layout:
    id     SERIAL PRIMARY KEY   assigned by the database, never updated
    name   TEXT                 no length or format constraint
    email  TEXT                 no uniqueness constraint
    age    INTEGER              no range constraint

Listing always orders by id, so the primary key index serves both
lookups by id and the paginated scan.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """A single row of the users table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(Text, nullable=False, default="")
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
