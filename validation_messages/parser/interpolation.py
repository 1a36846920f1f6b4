"""Placeholder substitution for validation message templates."""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any


def interpolate_message(template: str, options: Mapping[str, Any]) -> str:
    """Insert option values into ``%{name}`` placeholders of a template.

    Every occurrence of a placeholder whose name is an option key is replaced
    by the value's string form. Placeholders without a matching option stay
    verbatim and options without a placeholder are ignored. Substituted text
    is not scanned again.

    >>> interpolate_message("length should be between %{one} and %{two}", {"one": "1", "two": "2", "three": "3"})
    'length should be between 1 and 2'
    """
    if "%{" not in template or not options:
        return template

    values = {str(key): value for key, value in options.items()}
    # Longest names first so a key never shadows a longer key it prefixes.
    names = sorted(values, key=len, reverse=True)
    pattern = re.compile(r"%\{(" + "|".join(re.escape(name) for name in names) + r")\}")

    return pattern.sub(lambda match: str(values[match.group(1)]), template)
