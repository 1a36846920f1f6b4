"""Shared pytest fixtures for validation message test suites."""

from collections.abc import Generator
from pathlib import Path
import sys
from typing import Literal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from pydantic import Field

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class Address(BaseModel):
    city: str = Field(min_length=2)
    zip_code: str = Field(pattern=r"^\d{5}$")


class LineItem(BaseModel):
    sku: str
    quantity: int = Field(gt=0)


class Order(BaseModel):
    name: str = Field(max_length=5)
    status: Literal["open", "closed"]
    address: Address
    items: list[LineItem]
    tags: list[int] = []


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Reload environment-driven settings for every test."""
    from validation_messages.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def order_model() -> type[Order]:
    """Provide a nested pydantic model exercising every tree shape."""
    return Order


@pytest.fixture
def app() -> FastAPI:
    """Provide an API app with the shared error handlers registered."""
    from validation_messages.core.errors import ValidationFailedError
    from validation_messages.core.errors import register_error_handlers
    from validation_messages.parser.messages import extract_messages
    from validation_messages.schemas.message import RawError

    app = FastAPI()
    register_error_handlers(app)

    @app.post("/orders")
    def create_order(order: Order) -> dict[str, str]:
        return {"name": order.name}

    @app.post("/accounts")
    def create_account() -> None:
        raise ValidationFailedError(
            extract_messages(
                {
                    "email": [RawError("has already been taken", {"validation": "unsafe_unique", "fields": ["email"]})],
                    "profile": {"nickname": [RawError("should be at most %{count} character(s)", {"count": 8, "validation": "length", "max": 8})]},
                }
            )
        )

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("database exploded")

    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Provide an API test client for contract suites."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
