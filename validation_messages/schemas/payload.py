"""Pydantic schema for mutation result payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from validation_messages.schemas.message import ValidationMessage


class MutationPayload(BaseModel):
    """Result of a mutation: either a result value or validation messages."""

    successful: bool
    messages: list[ValidationMessage] = []
    result: Any = None
