"""Classification of raw validation errors into stable error codes.

Validation layers attach a human template and loosely-typed options to each
failure but rarely a machine code. ``classify`` recovers one from the
available signal, moving from explicit options down to exact matches on the
canonical phrasing the validation layer produces.

Rules are evaluated top to bottom and the first match wins. The order matters:
"less than or equal to" has to be tested before "less than", and
"greater than or equal to" before "greater than".
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Union

from validation_messages.schemas.message import ErrorCode

Facts = Mapping[str, Any]

_PASSTHROUGH_VALIDATIONS = (
    ErrorCode.CAST,
    ErrorCode.REQUIRED,
    ErrorCode.FORMAT,
    ErrorCode.INCLUSION,
    ErrorCode.EXCLUSION,
    ErrorCode.SUBSET,
    ErrorCode.ACCEPTANCE,
    ErrorCode.CONFIRMATION,
)

_NUMBER_PHRASES = (
    ("less than or equal to", ErrorCode.LESS_THAN_OR_EQUAL_TO),
    ("greater than or equal to", ErrorCode.GREATER_THAN_OR_EQUAL_TO),
    ("less than", ErrorCode.LESS_THAN),
    ("greater than", ErrorCode.GREATER_THAN),
    ("equal to", ErrorCode.EQUAL_TO),
)


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate over the error facts and the code it yields."""

    name: str
    predicate: Callable[[Facts], bool]
    code: Union[ErrorCode, Callable[[Facts], Any]]

    def resolve(self, facts: Facts) -> Any:
        if callable(self.code):
            return self.code(facts)
        return self.code


def _validation_is(kind: str) -> Callable[[Facts], bool]:
    return lambda facts: _as_text(facts.get("validation")) == kind


def _length_with(option: str) -> Callable[[Facts], bool]:
    return lambda facts: _as_text(facts.get("validation")) == "length" and option in facts


def _number_containing(phrase: str) -> Callable[[Facts], bool]:
    return lambda facts: _as_text(facts.get("validation")) == "number" and phrase in _as_text(facts.get("message"))


def _message_is(text: str) -> Callable[[Facts], bool]:
    return lambda facts: _as_text(facts.get("message")) == text


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, ErrorCode):
        return value.value
    return str(value)


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    # 1) Caller override
    ClassificationRule("explicit_code", lambda facts: "code" in facts, lambda facts: facts["code"]),
    # 2) Validation kinds that name their own code
    *(ClassificationRule(f"validation_{code.value}", _validation_is(code.value), code) for code in _PASSTHROUGH_VALIDATIONS),
    # 3) Length bounds; `is` beats `min` beats `max`
    ClassificationRule("length_is", _length_with("is"), ErrorCode.LENGTH),
    ClassificationRule("length_min", _length_with("min"), ErrorCode.MIN),
    ClassificationRule("length_max", _length_with("max"), ErrorCode.MAX),
    # 4) Number comparisons, recognized from the message phrasing
    *(ClassificationRule(f"number_{code.value}", _number_containing(phrase), code) for phrase, code in _NUMBER_PHRASES),
    ClassificationRule("number_unmatched", _validation_is("number"), ErrorCode.UNKNOWN),
    # 5) Constraint errors, recognized from exact canonical messages
    ClassificationRule("association", lambda facts: _message_is("is invalid")(facts) and "type" in facts, ErrorCode.ASSOCIATION),
    ClassificationRule("unique", _message_is("has already been taken"), ErrorCode.UNIQUE),
    ClassificationRule("foreign", _message_is("does not exist"), ErrorCode.FOREIGN),
    ClassificationRule("no_assoc", _message_is("is still associated with this entry"), ErrorCode.NO_ASSOC),
)


def classify(options: Mapping[str, Any], message: str) -> Any:
    """Return a stable code for a raw error; never fails, defaults to ``unknown``.

    ``message`` is the template as produced by the validation layer. Options
    are merged over it, so an option named ``message`` takes precedence.
    """
    facts: dict[str, Any] = {"message": message}
    facts.update({str(key): value for key, value in options.items()})

    for rule in CLASSIFICATION_RULES:
        if rule.predicate(facts):
            return rule.resolve(facts)
    return ErrorCode.UNKNOWN
