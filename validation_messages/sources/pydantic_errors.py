"""Build raw error trees from pydantic validation errors."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from validation_messages.core.config import get_settings
from validation_messages.schemas.message import RawError

# Holds leaf errors reported against a nested record as a whole.
ROOT_KEY = "__root__"

# Larger integers in a location are treated as mapping keys, not list positions.
MAX_RECORD_INDEX = 10_000

_LENGTH_TEMPLATES: dict[str, tuple[str, str, str, str]] = {
    "string_too_short": ("should be at least %{count} character(s)", "string", "min", "min_length"),
    "string_too_long": ("should be at most %{count} character(s)", "string", "max", "max_length"),
    "too_short": ("should have at least %{count} item(s)", "list", "min", "min_length"),
    "too_long": ("should have at most %{count} item(s)", "list", "max", "max_length"),
}

_NUMBER_TEMPLATES: dict[str, tuple[str, str]] = {
    "greater_than": ("must be greater than %{number}", "gt"),
    "greater_than_equal": ("must be greater than or equal to %{number}", "ge"),
    "less_than": ("must be less than %{number}", "lt"),
    "less_than_equal": ("must be less than or equal to %{number}", "le"),
}

ErrorSource = Union[PydanticValidationError, Iterable[Mapping[str, Any]]]


def error_tree_from_pydantic(
    errors: ErrorSource,
    *,
    prefixes: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Convert pydantic error details into a nested field → errors tree.

    String location parts become nested records and an integer following a
    field makes that field a list of repeated records. An integer at the end
    of a location (an invalid list item) is kept on the owning field as the
    ``index`` option.
    """
    details = errors.errors() if isinstance(errors, PydanticValidationError) else list(errors)
    strip = tuple(get_settings().location_prefixes if prefixes is None else prefixes)

    tree: dict[str, Any] = {}
    leaves: list[tuple[dict[str, Any], str, RawError]] = []

    for detail in details:
        parts, trailing = _split_location(detail.get("loc", ()), strip)
        raw = raw_error_from_pydantic(detail)
        if trailing:
            index: Any = trailing[0] if len(trailing) == 1 else list(trailing)
            raw = RawError(template=raw.template, options={**raw.options, "index": index})

        steps = _steps(parts)
        node = tree
        for field, position in steps[:-1]:
            node = _descend(node, field, position)

        leaf_field = steps[-1][0]
        # Reserve the key now so fields keep the order they were first reported in.
        node.setdefault(leaf_field, None)
        leaves.append((node, leaf_field, raw))

    # Leaves attach after every container exists, so a list-level error never
    # shifts the positions of indexed records.
    for node, field, raw in leaves:
        _attach(node, field, raw)
    return tree


def raw_error_from_pydantic(detail: Mapping[str, Any]) -> RawError:
    """Map one pydantic error detail to a raw error with a canonical template."""
    error_type = str(detail.get("type", ""))
    ctx = detail.get("ctx") or {}

    if error_type == "missing":
        return RawError("can't be blank", {"validation": "required"})

    if error_type in _LENGTH_TEMPLATES:
        template, kind, bound, ctx_key = _LENGTH_TEMPLATES[error_type]
        count = ctx.get(ctx_key)
        return RawError(template, {"count": count, "validation": "length", "kind": bound, "type": kind, bound: count})

    if error_type in _NUMBER_TEMPLATES:
        template, ctx_key = _NUMBER_TEMPLATES[error_type]
        return RawError(template, {"validation": "number", "kind": error_type, "number": ctx.get(ctx_key)})

    if error_type == "string_pattern_mismatch":
        return RawError("has invalid format", {"validation": "format", "pattern": ctx.get("pattern")})

    if error_type in ("literal_error", "enum"):
        return RawError("is invalid", {"validation": "inclusion", "enum": ctx.get("expected")})

    if error_type.endswith("_parsing") or error_type.endswith("_type"):
        cast_type = error_type.rsplit("_", 1)[0]
        return RawError("is invalid", {"validation": "cast", "type": cast_type})

    return RawError(str(detail.get("msg", "is invalid")), {})


def _split_location(location: Any, strip: tuple[str, ...]) -> tuple[list[Any], list[int]]:
    if not isinstance(location, (tuple, list)):
        location = (location,)

    parts = list(location)
    if len(parts) > 1 and parts[0] in strip:
        parts.pop(0)
    if not parts:
        parts = ["request"]

    trailing: list[int] = []
    while len(parts) > 1 and isinstance(parts[-1], int):
        trailing.insert(0, parts.pop())
    return parts, trailing


def _steps(parts: list[Any]) -> list[tuple[str, int | None]]:
    steps: list[tuple[str, int | None]] = []
    for part in parts:
        if _is_record_index(part) and steps and steps[-1][1] is None:
            steps[-1] = (steps[-1][0], part)
        else:
            steps.append((str(part), None))
    return steps


def _is_record_index(part: Any) -> bool:
    # Integer dict keys also show up in locations; only small non-negative ones are list positions.
    return isinstance(part, int) and 0 <= part <= MAX_RECORD_INDEX


def _descend(node: dict[str, Any], field: str, position: int | None) -> dict[str, Any]:
    # A location is either a record or a sequence of records, never both.
    existing = node.get(field)
    if position is None:
        if not isinstance(existing, dict):
            existing = node[field] = {}
        return existing

    if not isinstance(existing, list):
        existing = node[field] = []
    while len(existing) <= position:
        existing.append({})
    return existing[position]


def _attach(node: dict[str, Any], field: str, raw: RawError) -> None:
    existing = node.get(field)
    if existing is None:
        node[field] = [raw]
    elif isinstance(existing, list):
        existing.append(raw)
    else:
        existing.setdefault(ROOT_KEY, []).append(raw)
