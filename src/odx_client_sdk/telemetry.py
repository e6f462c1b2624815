"""Till operation events written as JSON lines.

Each facade operation yields one event. Session lifecycle operations are
filed under ``session``, failures under ``error`` and every other
successful call under ``api_call_result``. Event context carries record
ids and counts; partner contact fields and credentials are dropped before
an event is built.
"""

from __future__ import annotations

import asyncio
import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

API_CALL_RESULT = "api_call_result"
SESSION = "session"
ERROR = "error"

SESSION_ACTIONS = frozenset({"open_store", "close_store", "get_open_session_id", "get_session_state"})

_BLOCKED_CONTEXT_KEYS = frozenset(
    {
        "name",
        "email",
        "phone",
        "vat",
        "street",
        "street2",
        "city",
        "country",
        "api_key",
        "odoo_api_key",
        "odx_api_key",
        "authorization",
    }
)


def category_for(action: str, success: bool) -> str:
    if not success:
        return ERROR
    return SESSION if action in SESSION_ACTIONS else API_CALL_RESULT


def scrub_context(context: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not context:
        return None
    kept = {
        key: value
        for key, value in context.items()
        if value is not None and key.lower() not in _BLOCKED_CONTEXT_KEYS
    }
    return kept or None


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    action: str
    success: bool
    timestamp_utc: str
    duration_ms: int | None = None
    trace_id: str | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return f"pos.{self.action}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "category": self.category,
            "name": self.name,
            "action": self.action,
            "success": self.success,
            "timestamp_utc": self.timestamp_utc,
        }
        for key in ("duration_ms", "trace_id", "error_code", "context"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


def build_event(
    *,
    action: str,
    success: bool,
    duration_ms: int | None = None,
    trace_id: str | None = None,
    error_code: str | None = None,
    context: Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    return TelemetryEvent(
        category=category_for(action, success),
        action=action,
        success=success,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        duration_ms=duration_ms,
        trace_id=trace_id,
        error_code=error_code,
        context=scrub_context(context),
    )


class TelemetryLogger:
    """Appends events to a JSONL file; off unless enabled explicitly or by env."""

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool | None = None,
        log_file: str | Path | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = enabled if enabled is not None else _env_telemetry_enabled()
        self.log_file = Path(log_file) if log_file else Path("artifacts") / "telemetry" / f"{app_name}.jsonl"
        self._lock = threading.Lock()

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        payload = event.to_dict()
        payload["app_name"] = self.app_name
        line = json.dumps(payload, sort_keys=True, default=str)
        with self._lock:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(f"{line}\n")
        return True

    async def emit_async(self, event: TelemetryEvent) -> bool:
        """Write the event from a worker thread so the event loop never blocks on disk."""
        if not self.enabled:
            return False
        return await asyncio.to_thread(self.emit, event)


def _env_telemetry_enabled() -> bool:
    value = os.getenv("ODX_TELEMETRY_ENABLED", "0").strip().lower()
    return value in {"1", "true", "yes", "on"}
