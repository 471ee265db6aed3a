"""
Users Backend — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Request bodies are lenient on purpose: every field has a zero-value default
and unknown keys are ignored, so `{}` creates a user with name "", email ""
and age 0; an explicit null reads the same as a missing field. Values are
not coerced: a JSON string for age or a number for name is rejected, as is
JSON that cannot be decoded.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserPayload(BaseModel):
    """
    What:  Body of POST /users and PUT /users/{id}.
    Who:   Parsed by FastAPI before the handler runs.

    PUT is a full replace: fields missing from the body overwrite the
    stored values with their zero values.
    """
    name: str = Field(default="", strict=True, description="Display name")
    email: str = Field(default="", strict=True, description="Email address (not validated)")
    age: int = Field(default=0, strict=True, description="Age in years (not range-checked)")

    model_config = {"extra": "ignore"}

    @field_validator("name", "email", "age", mode="before")
    @classmethod
    def null_as_zero_value(cls, v, info: ValidationInfo):
        """null leaves the field at its zero value."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """A stored user, exactly as the row reads."""
    id: int = Field(description="Database-assigned identifier")
    name: str
    email: str
    age: int

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    """
    What:  Page of users plus the total number of matching rows.
    Who:   Returned by GET /users.

    totalCount ignores page/limit so the client can compute the page count
    as ceil(totalCount / limit).
    """
    users: List[UserResponse] = Field(description="Users on this page, ordered by id")
    total_count: int = Field(
        alias="totalCount",
        description="Number of users matching the search filter",
    )

    model_config = {"populate_by_name": True}


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. {"message": "User created successfully"}."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.

    Fields:
        error: Human-readable description (e.g. "Failed to fetch users")
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
