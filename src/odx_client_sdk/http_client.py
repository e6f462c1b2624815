from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from .config import ClientConfig
from .error_mapper import map_http_error
from .exceptions import TransportError
from .models import Domain, KeywordRequest, ServerResponse

logger = logging.getLogger(__name__)

EXECUTE_PATH = "/api/odoo/execute"
API_KEY_HEADER = "X-Api-Key"
TRACE_HEADER = "X-Trace-ID"

# create, write and call_method are sent exactly once.
RETRYABLE_ACTIONS = frozenset({"search_read"})


@dataclass
class LastOperation:
    action: str
    model: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class OdxProxyClient:
    """Async transport to the ODX gateway, one instance per facade."""

    config: ClientConfig
    http: httpx.AsyncClient | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        self.config.validate()
        if self.http is None:
            self.http = httpx.AsyncClient(
                base_url=self.config.gateway_url,
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_ssl,
            )

    async def search_read(self, model: str, domain: Domain, keyword: KeywordRequest) -> ServerResponse:
        return await self.execute("search_read", model, keyword, params=domain)

    async def create(
        self, model: str, values: list[dict[str, Any]], keyword: KeywordRequest
    ) -> ServerResponse:
        return await self.execute("create", model, keyword, params=values)

    async def write(
        self, model: str, ids: list[int], values: dict[str, Any], keyword: KeywordRequest
    ) -> ServerResponse:
        return await self.execute("write", model, keyword, params=[ids, values])

    async def call_method(
        self, model: str, method: str, args: list[Any], keyword: KeywordRequest
    ) -> ServerResponse:
        return await self.execute("call_method", model, keyword, params=args, fn_name=method)

    async def execute(
        self,
        action: str,
        model: str,
        keyword: KeywordRequest,
        *,
        params: list[Any],
        fn_name: str | None = None,
    ) -> ServerResponse:
        if self.http is None:
            raise RuntimeError("HTTP client not initialized")
        request_id = str(uuid.uuid4())
        body = {
            "id": request_id,
            "action": action,
            "model_id": model,
            "keyword": keyword.to_wire(),
            "fn_name": fn_name,
            "params": params,
            "odoo_instance": {
                "url": self.config.base_url,
                "user_id": self.config.instance_user_id,
                "db": self.config.database,
                "api_key": self.config.odoo_api_key,
            },
        }
        headers = {
            "Accept": "application/json",
            API_KEY_HEADER: self.config.odx_api_key,
            TRACE_HEADER: request_id,
        }

        attempts = self.config.retries + 1 if action in RETRYABLE_ACTIONS else 1
        started = time.monotonic()
        response: httpx.Response | None = None
        for attempt in range(attempts):
            try:
                response = await self.http.post(EXECUTE_PATH, json=body, headers=headers)
            except httpx.TransportError as exc:
                if attempt >= attempts - 1:
                    self._record(action, model, started, "error", request_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc) or type(exc).__name__,
                        details={"type": type(exc).__name__},
                        trace_id=request_id,
                    ) from exc
                logger.warning(
                    "odx_request_retry",
                    extra={"action": action, "model": model, "attempt": attempt + 1, "trace_id": request_id},
                )
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            await asyncio.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("ODX request finished without a response")

        payload = _safe_json(response)
        if response.is_error and not (isinstance(payload, dict) and payload.get("error") is not None):
            self._record(action, model, started, "error", request_id)
            raise map_http_error(
                response.status_code,
                payload if isinstance(payload, dict) else {"message": response.text},
                request_id,
            )
        if not isinstance(payload, dict):
            self._record(action, model, started, "error", request_id)
            raise TransportError(
                code="INVALID_RESPONSE",
                message="Expected the gateway response to be a JSON object",
                details={"status_code": response.status_code},
                trace_id=request_id,
            )
        try:
            envelope = ServerResponse.model_validate(payload)
        except ValidationError as exc:
            self._record(action, model, started, "error", request_id)
            raise TransportError(
                code="INVALID_RESPONSE",
                message="Gateway response envelope could not be read",
                details={"status_code": response.status_code, "error_count": exc.error_count()},
                trace_id=request_id,
            ) from exc
        self._record(action, model, started, "success" if envelope.ok else "error", request_id)
        return envelope

    async def aclose(self) -> None:
        if self.http is not None:
            await self.http.aclose()

    async def __aenter__(self) -> "OdxProxyClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _record(self, action: str, model: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            action=action,
            model=model,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
