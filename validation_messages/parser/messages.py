"""Convert nested validation error trees into flat lists of validation messages."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Mapping
import logging
from typing import Any

from validation_messages.parser.classifier import classify
from validation_messages.parser.fields import FieldNamer
from validation_messages.parser.fields import get_field_namer
from validation_messages.parser.interpolation import interpolate_message
from validation_messages.schemas.message import RESERVED_OPTION_KEYS
from validation_messages.schemas.message import ErrorLeaf
from validation_messages.schemas.message import ErrorTree
from validation_messages.schemas.message import RawError
from validation_messages.schemas.message import ValidationMessage

logger = logging.getLogger(__name__)


def messages_as_map(tree: ErrorTree) -> dict[str, Any]:
    """Return the raw nested error map, with every leaf as a ``RawError``."""
    return traverse_errors(tree, lambda _field, error: error)


def extract_messages(tree: ErrorTree, field_namer: FieldNamer | None = None) -> list[ValidationMessage]:
    """Build a flat, ordered list of validation messages from an error tree.

    Nested records produce composed field paths such as ``parent.child`` and
    repeated records indexed paths such as ``parent[1].child``; the exact
    shape is up to ``field_namer``, which defaults to the configured strategy.
    """
    namer = field_namer or get_field_namer()
    normalized = traverse_errors(tree, lambda field, error: construct_message(field, error, namer))
    messages = list(flatten_messages(normalized, namer))
    logger.debug("Extracted %d validation messages from %d top-level fields", len(messages), len(normalized))
    return messages


def construct_message(field: Any, error: ErrorLeaf, field_namer: FieldNamer | None = None) -> ValidationMessage:
    """Classify and render a single raw error for ``field``."""
    namer = field_namer or get_field_namer()
    raw = RawError.coerce(error)
    return ValidationMessage(
        code=classify(raw.options, raw.template),
        field=namer(field, None),
        key=str(field),
        template=raw.template,
        message=interpolate_message(raw.template, raw.options),
        options=tidy_options(raw.options),
    )


def tidy_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the options consumed by classification."""
    return {str(key): value for key, value in options.items() if str(key) not in RESERVED_OPTION_KEYS}


def traverse_errors(tree: ErrorTree, fn: Callable[[Any, RawError], Any]) -> dict[str, Any]:
    """Map every raw error leaf through ``fn(field, error)``, keeping the tree shape."""
    return {field: _traverse_value(field, value, fn) for field, value in tree.items()}


def _traverse_value(field: Any, value: Any, fn: Callable[[Any, RawError], Any]) -> Any:
    if isinstance(value, Mapping):
        return traverse_errors(value, fn)
    if isinstance(value, list):
        return [_traverse_item(field, item, fn) for item in value]
    return value


def _traverse_item(field: Any, item: Any, fn: Callable[[Any, RawError], Any]) -> Any:
    if isinstance(item, Mapping):
        return traverse_errors(item, fn)
    if isinstance(item, RawError) or _is_error_pair(item):
        return fn(field, RawError.coerce(item))
    return item


def _is_error_pair(item: Any) -> bool:
    if not (isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)):
        return False
    return isinstance(item[1], Mapping) or _is_keyword_list(item[1])


def _is_keyword_list(options: Any) -> bool:
    return isinstance(options, (list, tuple)) and all(
        isinstance(pair, tuple) and len(pair) == 2 and isinstance(pair[0], str) for pair in options
    )


def flatten_messages(tree: Mapping[str, Any], field_namer: FieldNamer) -> Iterator[Any]:
    """Flatten a tree of normalized messages, rewriting fields to full paths."""
    for field, value in tree.items():
        yield from _flatten_entry(field_namer(field, None), value, field_namer)


def _flatten_entry(parent_field: Any, value: Any, field_namer: FieldNamer) -> Iterator[Any]:
    if isinstance(value, Mapping):
        for field, nested in value.items():
            yield from _flatten_entry(field_namer(parent_field, field), nested, field_namer)
        return

    if isinstance(value, list):
        for index, item in enumerate(value):
            if isinstance(item, ValidationMessage):
                yield item.model_copy(update={"field": str(parent_field)})
            elif isinstance(item, Mapping):
                for field, nested in item.items():
                    yield from _flatten_entry(field_namer(parent_field, field, index=index), nested, field_namer)
            else:
                logger.warning("Passing through unrecognized error item for field=%s: %r", parent_field, item)
                yield item
        return

    logger.warning("Passing through unrecognized error value for field=%s: %r", parent_field, value)
    yield value
