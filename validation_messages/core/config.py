"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_FIELD_NAMER = "dotted"
DEFAULT_FIELD_SEPARATOR = "."
DEFAULT_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _get_tuple_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings for message extraction."""

    field_namer: str
    field_separator: str
    location_prefixes: tuple[str, ...]

    def safe_for_logging(self) -> dict[str, str]:
        """Return settings in a shape suitable for log lines."""
        return {
            "field_namer": self.field_namer,
            "field_separator": self.field_separator,
            "location_prefixes": ",".join(self.location_prefixes),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load extraction settings from the environment."""
    return Settings(
        field_namer=_get_str_env("VALIDATION_MESSAGES_FIELD_NAMER", DEFAULT_FIELD_NAMER),
        field_separator=os.getenv("VALIDATION_MESSAGES_FIELD_SEPARATOR", DEFAULT_FIELD_SEPARATOR),
        location_prefixes=_get_tuple_env("VALIDATION_MESSAGES_LOCATION_PREFIXES", DEFAULT_LOCATION_PREFIXES),
    )
