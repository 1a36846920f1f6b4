"""Service helpers that wrap mutation outcomes in result payloads."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from validation_messages.core.errors import ValidationFailedError
from validation_messages.parser.fields import FieldNamer
from validation_messages.parser.messages import extract_messages
from validation_messages.schemas.message import ErrorCode
from validation_messages.schemas.message import ValidationMessage
from validation_messages.schemas.payload import MutationPayload
from validation_messages.sources.pydantic_errors import error_tree_from_pydantic

MessageInput = Union[ValidationMessage, Sequence[ValidationMessage], Mapping[str, Any], str]


def success_payload(result: Any) -> MutationPayload:
    """Wrap a successful mutation result."""
    return MutationPayload(successful=True, messages=[], result=result)


def error_payload(messages: MessageInput, *, field_namer: FieldNamer | None = None) -> MutationPayload:
    """Wrap validation messages, an error tree or a plain error string."""
    return MutationPayload(successful=False, messages=_as_messages(messages, field_namer), result=None)


def convert_to_payload(value: Any, *, field_namer: FieldNamer | None = None) -> MutationPayload:
    """Build a payload from whatever a mutation resolver produced.

    Validation exceptions and validation messages become error payloads;
    any other value is treated as the mutation result.
    """
    if isinstance(value, PydanticValidationError):
        return error_payload(error_tree_from_pydantic(value), field_namer=field_namer)
    if isinstance(value, ValidationFailedError):
        return error_payload(value.messages)
    if isinstance(value, ValidationMessage):
        return error_payload([value])
    if isinstance(value, list) and value and all(isinstance(item, ValidationMessage) for item in value):
        return error_payload(value)
    return success_payload(value)


def _as_messages(messages: MessageInput, field_namer: FieldNamer | None) -> list[ValidationMessage]:
    if isinstance(messages, ValidationMessage):
        return [messages]
    if isinstance(messages, str):
        return [
            ValidationMessage(
                code=ErrorCode.UNKNOWN,
                field=None,
                key=None,
                template=messages,
                message=messages,
                options={},
            )
        ]
    if isinstance(messages, Mapping):
        return extract_messages(messages, field_namer)
    return list(messages)
