"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from pydantic import BaseModel

from validation_messages.schemas.message import ValidationMessage


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    code: str
    message: str
    details: list[ValidationMessage] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject
