from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from .clients.base import RemoteRecordClient
from .config import ClientConfig, load_config
from .exceptions import OdxError
from .http_client import OdxProxyClient
from .models import RequestContext
from .models_catalog import Partner, Product
from .models_pos import DEFAULT_ORDER_NAME, DEFAULT_PAYMENT_METHOD_ID, DEFAULT_SESSION_NAME, SessionState
from .services.catalog import DEFAULT_PARTNER_LIMIT, DEFAULT_PRODUCT_LIMIT, CatalogService
from .services.order_submitter import OrderSubmitter
from .services.session_manager import SessionManager
from .telemetry import TelemetryLogger, build_event

logger = logging.getLogger(__name__)

T = TypeVar("T")


def unwrap_error(exc: BaseException) -> BaseException:
    """Strip wrapper exceptions down to the domain error that caused them."""
    current = exc
    seen: set[int] = set()
    while id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, OdxError):
            return current
        if isinstance(current, BaseExceptionGroup) and len(current.exceptions) == 1:
            current = current.exceptions[0]
            continue
        if current.__cause__ is None:
            return current
        current = current.__cause__
    return current


class PosServiceFacade:
    """Single entry point for the desktop front-end.

    Every public coroutine builds a fresh request context, delegates to one
    service and either returns its value or raises the domain error.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        client: RemoteRecordClient | None = None,
        telemetry: TelemetryLogger | None = None,
        session_name: str = DEFAULT_SESSION_NAME,
        order_name: str = DEFAULT_ORDER_NAME,
        payment_method_id: int = DEFAULT_PAYMENT_METHOD_ID,
    ) -> None:
        config.validate()
        self.config = config
        self._owned_client: OdxProxyClient | None = None
        if client is None:
            self._owned_client = OdxProxyClient(config)
            client = self._owned_client
        self.client = client
        self.telemetry = telemetry or TelemetryLogger(app_name="odx_pos")
        self.catalog = CatalogService(client)
        self.sessions = SessionManager(client, session_name=session_name)
        self.orders = OrderSubmitter(client, payment_method_id=payment_method_id, order_name=order_name)

    @classmethod
    def from_env(cls, env_file: str | None = None, **kwargs: Any) -> "PosServiceFacade":
        return cls(load_config(env_file), **kwargs)

    async def list_partners(self, limit: int = DEFAULT_PARTNER_LIMIT, offset: int = 0) -> list[Partner]:
        context = RequestContext()
        return await self._run(
            "list_partners",
            lambda: self.catalog.list_partners(limit=limit, offset=offset, context=context),
            describe=lambda partners: {"count": len(partners), "offset": offset},
        )

    async def list_products(self, limit: int = DEFAULT_PRODUCT_LIMIT, offset: int = 0) -> list[Product]:
        context = RequestContext()
        return await self._run(
            "list_products",
            lambda: self.catalog.list_products(limit=limit, offset=offset, context=context),
            describe=lambda products: {"count": len(products), "offset": offset},
        )

    async def get_open_session_id(self) -> int | None:
        context = RequestContext()
        return await self._run(
            "get_open_session_id",
            lambda: self.sessions.get_open_session_id(context),
            describe=lambda session_id: {"session_id": session_id},
        )

    async def get_session_state(self) -> SessionState:
        context = RequestContext()
        return await self._run(
            "get_session_state",
            lambda: self.sessions.get_session_state(context),
            describe=lambda state: {"state": state.value},
        )

    async def open_store(self) -> int:
        context = RequestContext()
        return await self._run(
            "open_store",
            lambda: self.sessions.open_store(context),
            describe=lambda session_id: {"session_id": session_id},
        )

    async def close_store(self) -> bool:
        context = RequestContext()
        return await self._run("close_store", lambda: self.sessions.close_store(context))

    async def submit_order(self, cart: Iterable[Product]) -> int:
        context = RequestContext()
        products = list(cart)

        async def _submit() -> int:
            # the cart check must not wait on a session lookup
            if not products:
                return await self.orders.submit_order(None, products, context)
            session_id = await self.sessions.get_open_session_id(context)
            return await self.orders.submit_order(session_id, products, context)

        return await self._run(
            "submit_order",
            _submit,
            describe=lambda order_id: {"order_id": order_id, "line_count": len(products)},
        )

    async def aclose(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.aclose()

    async def __aenter__(self) -> "PosServiceFacade":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _run(
        self,
        action: str,
        operation: Callable[[], Awaitable[T]],
        *,
        describe: Callable[[T], dict[str, Any]] | None = None,
    ) -> T:
        logger.info(f"{action}_attempt")
        started = perf_counter()
        try:
            result = await operation()
        except Exception as exc:
            cause = unwrap_error(exc)
            logger.warning(f"{action}_failure", extra={"error": str(cause)})
            await self._emit(
                action,
                started,
                success=False,
                error_code=getattr(cause, "code", type(cause).__name__),
                trace_id=getattr(cause, "trace_id", None),
            )
            if cause is exc:
                raise
            raise cause from None
        logger.info(f"{action}_success")
        await self._emit(action, started, success=True, context=describe(result) if describe else None)
        return result

    async def _emit(
        self,
        action: str,
        started: float,
        *,
        success: bool,
        error_code: str | None = None,
        trace_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        event = build_event(
            action=action,
            success=success,
            duration_ms=int((perf_counter() - started) * 1000),
            trace_id=trace_id,
            error_code=error_code,
            context=context,
        )
        # Telemetry write failures never change the outcome of an operation.
        try:
            await self.telemetry.emit_async(event)
        except OSError as exc:
            logger.warning("telemetry_emit_failure", extra={"action": action, "error": str(exc)})
