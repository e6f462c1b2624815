from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pytest

from odx_client_sdk.config import ClientConfig
from odx_client_sdk.models import Domain, KeywordRequest, ServerResponse
from odx_client_sdk.models_catalog import Product


@dataclass
class RecordedCall:
    action: str
    model: str
    args: tuple[Any, ...]
    keyword: KeywordRequest


@dataclass
class FakeRemoteClient:
    """In-memory RemoteRecordClient; responses are queued per (action, model)."""

    scripted: dict[tuple[str, str], list[ServerResponse]] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)

    def queue(self, action: str, model: str, *, result: Any = None, error: Any = None) -> None:
        response = ServerResponse.model_validate({"result": result, "error": error})
        self.scripted.setdefault((action, model), []).append(response)

    def calls_for(self, action: str, model: str | None = None) -> list[RecordedCall]:
        return [
            call for call in self.calls
            if call.action == action and (model is None or call.model == model)
        ]

    def _next(self, action: str, model: str, args: tuple[Any, ...], keyword: KeywordRequest) -> ServerResponse:
        self.calls.append(RecordedCall(action=action, model=model, args=args, keyword=keyword))
        queued = self.scripted.get((action, model))
        if not queued:
            raise AssertionError(f"Unexpected {action} on {model}")
        return queued.pop(0)

    async def search_read(self, model: str, domain: Domain, keyword: KeywordRequest) -> ServerResponse:
        return self._next("search_read", model, (domain,), keyword)

    async def create(self, model: str, values: list[dict[str, Any]], keyword: KeywordRequest) -> ServerResponse:
        return self._next("create", model, (values,), keyword)

    async def write(
        self, model: str, ids: list[int], values: dict[str, Any], keyword: KeywordRequest
    ) -> ServerResponse:
        return self._next("write", model, (ids, values), keyword)

    async def call_method(
        self, model: str, method: str, args: list[Any], keyword: KeywordRequest
    ) -> ServerResponse:
        return self._next(f"call_method:{method}", model, tuple(args), keyword)


@pytest.fixture
def remote() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        base_url="https://erp.example.com",
        database="odoo",
        odoo_api_key="odoo-key",
        odx_api_key="odx-key",
        gateway_url="https://gateway.example.com",
        retries=1,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def make_product():
    def _make(product_id: int, price: str, name: str | None = None) -> Product:
        return Product(
            id=product_id,
            name=name or f"Product {product_id}",
            price=Decimal(price),
            default_code=f"P{product_id}",
        )

    return _make
