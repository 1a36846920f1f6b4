"""Field-naming strategies used to compose flattened error field paths."""

from __future__ import annotations

from dataclasses import dataclass
import importlib
import logging
import re
from typing import Any
from typing import Protocol

from validation_messages.core.config import get_settings

logger = logging.getLogger(__name__)

_CAMEL_PATTERN = re.compile(r"(?<=[A-Za-z0-9])_+([A-Za-z0-9])")


class FieldNamerConfigError(ValueError):
    """Raised when the configured field namer cannot be resolved."""


class FieldNamer(Protocol):
    def __call__(self, parent_field: Any, field: Any, *, index: int | None = None) -> str: ...


@dataclass(frozen=True)
class DottedFieldNamer:
    """Join parent and child with a separator, indexing repeated records as ``parent[i]``.

    ``field=None`` names the parent alone.
    """

    separator: str = "."

    def __call__(self, parent_field: Any, field: Any, *, index: int | None = None) -> str:
        parent = self.segment(parent_field)
        if index is not None:
            parent = f"{parent}[{index}]"
        if field is None:
            return parent
        return f"{parent}{self.separator}{self.segment(field)}"

    def segment(self, value: Any) -> str:
        return str(value)


@dataclass(frozen=True)
class CamelFieldNamer(DottedFieldNamer):
    """Dotted naming with lower camelCase segments, as GraphQL clients expect."""

    def segment(self, value: Any) -> str:
        return camelize(str(value))


def camelize(value: str) -> str:
    """Convert ``snake_case`` runs to ``lowerCamelCase``; leading underscores are kept."""
    return _CAMEL_PATTERN.sub(lambda match: match.group(1).upper(), value)


_BUILTIN_NAMERS: dict[str, type[DottedFieldNamer]] = {
    "dotted": DottedFieldNamer,
    "camel": CamelFieldNamer,
}


def resolve_field_namer(name: str, *, separator: str = ".") -> FieldNamer:
    """Resolve a builtin namer name or a ``module:attribute`` import path."""
    builtin = _BUILTIN_NAMERS.get(name)
    if builtin is not None:
        return builtin(separator=separator)

    module_name, _, attribute = name.partition(":")
    if not module_name or not attribute:
        raise FieldNamerConfigError(f"Unknown field namer `{name}`; expected one of {sorted(_BUILTIN_NAMERS)} or `module:attribute`")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise FieldNamerConfigError(f"Cannot import field namer module `{module_name}`") from exc

    namer = getattr(module, attribute, None)
    if not callable(namer):
        raise FieldNamerConfigError(f"Field namer `{name}` is not callable")
    return namer


def get_field_namer() -> FieldNamer:
    """Return the process-wide configured field namer."""
    settings = get_settings()
    namer = resolve_field_namer(settings.field_namer, separator=settings.field_separator)
    logger.info("Resolved field namer with settings=%s", settings.safe_for_logging())
    return namer
