"""Unit tests for error tree traversal, normalization and flattening."""

from __future__ import annotations

import pytest

from validation_messages.core.config import get_settings
from validation_messages.parser.fields import CamelFieldNamer
from validation_messages.parser.fields import DottedFieldNamer
from validation_messages.parser.messages import construct_message
from validation_messages.parser.messages import extract_messages
from validation_messages.parser.messages import flatten_messages
from validation_messages.parser.messages import messages_as_map
from validation_messages.parser.messages import traverse_errors
from validation_messages.schemas.message import ErrorCode
from validation_messages.schemas.message import RawError
from validation_messages.schemas.message import ValidationMessage

BLANK = RawError("can't be blank", {"validation": "required"})
TOO_LONG = RawError("should be at most %{count} character(s)", {"count": 10, "validation": "length", "kind": "max", "max": 10})


def test_construct_message_classifies_renders_and_tidies_options() -> None:
    message = construct_message("title", TOO_LONG, DottedFieldNamer())

    assert message == ValidationMessage(
        code=ErrorCode.MAX,
        field="title",
        key="title",
        template="should be at most %{count} character(s)",
        message="should be at most 10 character(s)",
        options={"count": 10, "kind": "max"},
    )


def test_construct_message_accepts_template_option_pairs() -> None:
    message = construct_message("email", ("has already been taken", {"validation": "unsafe_unique", "fields": ["email"]}), DottedFieldNamer())

    assert message.code == ErrorCode.UNIQUE
    assert message.options == {"fields": ["email"]}


def test_reserved_options_are_never_exposed() -> None:
    raw = RawError(
        "is %{is}, %{min}..%{max} with %{extra}",
        {"validation": "length", "is": 1, "min": 2, "max": 3, "code": "custom", "extra": "x"},
    )

    message = construct_message("field", raw, DottedFieldNamer())

    assert message.options == {"extra": "x"}
    assert message.message == "is 1, 2..3 with x"
    assert message.code == "custom"


def test_flat_field_yields_one_message_with_field_name() -> None:
    messages = extract_messages({"name": [BLANK]}, DottedFieldNamer())

    assert len(messages) == 1
    assert messages[0].field == "name"
    assert messages[0].key == "name"
    assert messages[0].code == ErrorCode.REQUIRED
    assert messages[0].message == "can't be blank"


def test_nested_record_composes_parent_and_child_fields() -> None:
    messages = extract_messages({"parent": {"child": [BLANK]}}, DottedFieldNamer())

    assert [(m.field, m.key) for m in messages] == [("parent.child", "child")]


def test_deeply_nested_records_compose_from_their_immediate_parent() -> None:
    messages = extract_messages({"order": {"address": {"city": [BLANK]}}}, DottedFieldNamer())

    assert messages[0].field == "order.address.city"
    assert messages[0].key == "city"


def test_repeated_records_encode_their_index() -> None:
    tree = {"parent": [{"child": [BLANK]}, {"child": [TOO_LONG]}]}

    messages = extract_messages(tree, DottedFieldNamer())

    assert [m.field for m in messages] == ["parent[0].child", "parent[1].child"]
    assert [m.code for m in messages] == [ErrorCode.REQUIRED, ErrorCode.MAX]


def test_repeated_records_without_errors_keep_positions() -> None:
    tree = {"items": [{}, {}, {"sku": [BLANK]}]}

    messages = extract_messages(tree, DottedFieldNamer())

    assert [m.field for m in messages] == ["items[2].sku"]


def test_repeated_records_inside_nested_record() -> None:
    tree = {"cart": {"items": [{"product": {"name": [BLANK]}}]}}

    messages = extract_messages(tree, DottedFieldNamer())

    assert messages[0].field == "cart.items[0].product.name"


def test_message_directly_inside_repeated_list_takes_parent_field() -> None:
    tree = {"tags": [{"name": [BLANK]}, ("is invalid", {"type": "many"})]}

    messages = extract_messages(tree, DottedFieldNamer())

    assert [(m.field, m.key, m.code) for m in messages] == [
        ("tags[0].name", "name", ErrorCode.REQUIRED),
        ("tags", "tags", ErrorCode.ASSOCIATION),
    ]


def test_flattening_preserves_traversal_order() -> None:
    tree = {
        "b": [BLANK, TOO_LONG],
        "a": {"z": [BLANK], "y": [BLANK]},
        "c": [{"x": [BLANK]}],
    }

    messages = extract_messages(tree, DottedFieldNamer())

    assert [m.field for m in messages] == ["b", "b", "a.z", "a.y", "c[0].x"]


def test_camel_namer_governs_every_field() -> None:
    tree = {"first_name": [BLANK], "line_items": [{"unit_price": [BLANK]}]}

    messages = extract_messages(tree, CamelFieldNamer())

    assert [(m.field, m.key) for m in messages] == [("firstName", "first_name"), ("lineItems[0].unitPrice", "unit_price")]


def test_extract_messages_uses_configured_namer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALIDATION_MESSAGES_FIELD_NAMER", "dotted")
    monkeypatch.setenv("VALIDATION_MESSAGES_FIELD_SEPARATOR", "/")
    get_settings.cache_clear()

    messages = extract_messages({"parent": [{"child": [BLANK]}]})

    assert messages[0].field == "parent[0]/child"


def test_field_namer_errors_propagate() -> None:
    def broken_namer(parent_field, field, *, index=None) -> str:
        raise LookupError("no name for field")

    with pytest.raises(LookupError):
        extract_messages({"parent": {"child": [BLANK]}}, broken_namer)


def test_unrecognized_shapes_pass_through_unchanged() -> None:
    leaf = construct_message("name", BLANK, DottedFieldNamer())

    flattened = list(flatten_messages({"weird": 42, "name": [leaf, None]}, DottedFieldNamer()))

    assert flattened[0] == 42
    assert flattened[1].field == "name"
    assert flattened[2] is None


def test_messages_as_map_returns_raw_tree() -> None:
    tree = {
        "title": [("can't be blank", {"validation": "required"})],
        "author": {"email": [TOO_LONG]},
        "comments": [{}, {"body": [BLANK]}],
    }

    assert messages_as_map(tree) == {
        "title": [BLANK],
        "author": {"email": [TOO_LONG]},
        "comments": [{}, {"body": [BLANK]}],
    }


def test_traverse_errors_keeps_tree_shape() -> None:
    tree = {"title": [BLANK], "author": {"email": [BLANK]}, "comments": [{"body": [BLANK, TOO_LONG]}]}

    traversed = traverse_errors(tree, lambda field, error: f"{field}:{error.template}")

    assert traversed == {
        "title": ["title:can't be blank"],
        "author": {"email": ["email:can't be blank"]},
        "comments": [{"body": ["body:can't be blank", "body:should be at most %{count} character(s)"]}],
    }


def test_keyword_list_options_are_accepted_as_raw_errors() -> None:
    tree = {"title": [("should be at most %{count} character(s)", [("count", 3), ("validation", "length"), ("max", 3)])]}

    (message,) = extract_messages(tree, DottedFieldNamer())

    assert message.code == ErrorCode.MAX
    assert message.message == "should be at most 3 character(s)"
    assert message.options == {"count": 3}


def test_messages_as_map_normalizes_keyword_list_options() -> None:
    tree = {"title": [("can't be blank", [("validation", "required")])]}

    assert messages_as_map(tree) == {"title": [BLANK]}
