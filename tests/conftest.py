"""Shared fixtures: a client wired to `httpx.MockTransport`."""

from __future__ import annotations

import json
import os
from collections import deque
from typing import Any, Callable, Iterator

import httpx
import pytest

from dodopayments.adapters.transport import HttpxTransport
from dodopayments.client import DodoPayments
from dodopayments.core.config import ClientSettings

BASE_URL = "https://api.test"


class FakeServer:
    """Queue of canned replies; records every request it receives.

    A reply is an `httpx.Response`, an exception instance (raised as a
    transport failure) or a callable `request -> reply`.
    """

    def __init__(self) -> None:
        self.replies: deque[Any] = deque()
        self.requests: list[httpx.Request] = []

    def add(self, *replies: Any) -> FakeServer:
        self.replies.extend(replies)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        reply = self.replies.popleft()
        if callable(reply) and not isinstance(reply, httpx.Response):
            reply = reply(request)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


def make_settings(**overrides: Any) -> ClientSettings:
    values: dict[str, Any] = {
        "api_key": "test-key",
        "base_url": BASE_URL,
        "backoff_initial_seconds": 0.0,
        "backoff_jitter_seconds": 0.0,
    }
    values.update(overrides)
    return ClientSettings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """No DODO_PAYMENTS_* variables and no project `.env` leak into tests."""

    for key in list(os.environ):
        if key.upper().startswith("DODO_PAYMENTS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def make_client(server: FakeServer) -> Iterator[Callable[..., DodoPayments]]:
    """Factory: `make_client(sleeps=[...], **settings)`.

    When `sleeps` is given the transport records the backoff delays instead
    of sleeping.
    """

    clients: list[DodoPayments] = []

    def factory(*, sleeps: list[float] | None = None, uniform: Any = None, **overrides: Any) -> DodoPayments:
        settings = make_settings(**overrides)
        http = httpx.Client(transport=httpx.MockTransport(server.handler))
        if sleeps is None:
            client = DodoPayments(settings=settings, http_client=http)
        else:
            transport = HttpxTransport(
                settings,
                http_client=http,
                sleep=sleeps.append,
                uniform=uniform or (lambda low, high: 0.0),
            )
            client = DodoPayments(settings=settings, transport=transport)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client: Callable[..., DodoPayments]) -> DodoPayments:
    return make_client()


def product_json(product_id: str = "pdt_1", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "product_id": product_id,
        "brand_id": "brd_1",
        "business_id": "bus_1",
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-02T10:00:00Z",
        "is_recurring": False,
        "license_key_enabled": False,
        "metadata": {},
        "name": "Widget",
        "price": {
            "type": "one_time_price",
            "currency": "USD",
            "price": 1500,
            "discount": 0,
            "purchasing_power_parity": False,
        },
        "tax_category": "saas",
    }
    data.update(overrides)
    return data


def product_item_json(product_id: str = "pdt_1", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "product_id": product_id,
        "business_id": "bus_1",
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-02T10:00:00Z",
        "is_recurring": False,
        "tax_category": "saas",
        "metadata": {},
        "name": f"Product {product_id}",
        "currency": "USD",
        "price": 1500,
    }
    data.update(overrides)
    return data


def payment_json(payment_id: str = "pay_1", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "payment_id": payment_id,
        "business_id": "bus_1",
        "created_at": "2024-05-01T10:00:00Z",
        "currency": "USD",
        "total_amount": 2500,
        "status": "succeeded",
        "customer": {"customer_id": "cus_1", "email": "ana@example.com", "name": "Ana"},
        "metadata": {},
    }
    data.update(overrides)
    return data


def webhook_json(webhook_id: str = "wh_1", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": webhook_id,
        "url": f"https://hooks.example.com/{webhook_id}",
        "description": "",
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
        "metadata": {},
        "filter_types": ["payment.succeeded"],
    }
    data.update(overrides)
    return data
