from __future__ import annotations

from typing import Any, Mapping

from .exceptions import (
    RemoteAccessError,
    RemoteError,
    RemoteMissingError,
    RemoteValidationError,
    TransportError,
)
from .models import RemoteErrorPayload

_BY_EXCEPTION_NAME: dict[str, type[RemoteError]] = {
    "AccessError": RemoteAccessError,
    "AccessDenied": RemoteAccessError,
    "UserError": RemoteValidationError,
    "ValidationError": RemoteValidationError,
    "MissingError": RemoteMissingError,
}


def map_remote_error(error: RemoteErrorPayload, trace_id: str | None = None) -> RemoteError:
    data = error.data if isinstance(error.data, Mapping) else {}
    exception_name = str(data.get("name") or "")
    short_name = exception_name.rsplit(".", 1)[-1]
    mapped = _BY_EXCEPTION_NAME.get(short_name, RemoteError)
    # Odoo puts the user-facing text in data.message and a generic one at the top.
    message = str(data.get("message") or error.message or "Remote call failed")
    code = str(error.code) if error.code is not None else "REMOTE_ERROR"
    details: dict[str, Any] | None = None
    if exception_name:
        details = {"name": exception_name}
    elif isinstance(error.data, str) and error.data:
        details = {"debug": error.data}
    return mapped(
        code=code,
        message=message,
        details=details,
        trace_id=trace_id,
    )


def map_http_error(status_code: int, payload: Mapping[str, Any] | None, trace_id: str | None) -> TransportError:
    payload = payload or {}
    message = str(payload.get("message") or payload.get("detail") or "Request failed")
    return TransportError(
        code=f"HTTP_{status_code}",
        message=message,
        details=dict(payload),
        trace_id=trace_id,
    )
