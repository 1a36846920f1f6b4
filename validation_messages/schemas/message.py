"""Raw and normalized validation message schemas."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict


class ErrorCode(str, Enum):
    CAST = "cast"
    ASSOCIATION = "association"
    ACCEPTANCE = "acceptance"
    CONFIRMATION = "confirmation"
    LENGTH = "length"
    MIN = "min"
    MAX = "max"
    LESS_THAN_OR_EQUAL_TO = "less_than_or_equal_to"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"
    GREATER_THAN = "greater_than"
    EQUAL_TO = "equal_to"
    EXCLUSION = "exclusion"
    INCLUSION = "inclusion"
    FORMAT = "format"
    REQUIRED = "required"
    SUBSET = "subset"
    UNIQUE = "unique"
    FOREIGN = "foreign"
    NO_ASSOC = "no_assoc"
    UNKNOWN = "unknown"


# Options consumed by classification and hidden from API consumers.
RESERVED_OPTION_KEYS = frozenset({"validation", "max", "is", "min", "code"})


@dataclass(frozen=True)
class RawError:
    """One failing validation as produced by the data layer: template plus options."""

    template: str
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: RawError | tuple[str, Any]) -> RawError:
        """Accept a RawError or a ``(template, options)`` pair; options may be a mapping or a list of key-value pairs."""
        if isinstance(value, RawError):
            return value
        template, options = value
        return cls(template=template, options=dict(options or {}))


class ValidationMessage(BaseModel):
    """Normalized, flattened validation error exposed to API clients."""

    model_config = ConfigDict(frozen=True)

    code: Any
    field: str | None = None
    key: str | None = None
    template: str
    message: str
    options: dict[str, Any] = {}


ErrorLeaf = Union[RawError, tuple[str, Mapping[str, Any]]]
ErrorTree = Mapping[str, Any]
