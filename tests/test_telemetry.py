from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from odx_client_sdk.telemetry import TelemetryLogger, build_event, category_for, scrub_context


@pytest.mark.parametrize(
    ("action", "success", "expected"),
    [
        ("list_products", True, "api_call_result"),
        ("submit_order", True, "api_call_result"),
        ("open_store", True, "session"),
        ("close_store", True, "session"),
        ("open_store", False, "error"),
        ("list_partners", False, "error"),
    ],
)
def test_category_follows_action_and_outcome(action: str, success: bool, expected: str) -> None:
    assert category_for(action, success) == expected


def test_build_event_drops_empty_fields() -> None:
    event = build_event(
        action="open_store",
        success=True,
        context={"session_id": 7},
        now=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    assert event.to_dict() == {
        "category": "session",
        "name": "pos.open_store",
        "action": "open_store",
        "success": True,
        "timestamp_utc": "2024-01-01T00:00:00+00:00",
        "context": {"session_id": 7},
    }


def test_scrub_context_keeps_ids_only() -> None:
    context = {"order_id": 9, "Email": "a@b.c", "phone": "+62", "odx_api_key": "k", "session_id": None}
    assert scrub_context(context) == {"order_id": 9}
    assert scrub_context({"name": "Deco Addict"}) is None
    assert scrub_context(None) is None


def test_disabled_logger_writes_nothing(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ODX_TELEMETRY_ENABLED", raising=False)
    log_file = tmp_path / "events.jsonl"
    logger = TelemetryLogger(app_name="pos", log_file=log_file)
    assert logger.emit(build_event(action="close_store", success=True)) is False
    assert not log_file.exists()


@pytest.mark.asyncio
async def test_emit_async_appends_jsonl(tmp_path) -> None:
    log_file = tmp_path / "nested" / "events.jsonl"
    logger = TelemetryLogger(app_name="pos", enabled=True, log_file=log_file)

    assert await logger.emit_async(build_event(action="submit_order", success=True, context={"order_id": 4}))
    assert await logger.emit_async(build_event(action="submit_order", success=False, error_code="EMPTY_CART"))

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [line["category"] for line in lines] == ["api_call_result", "error"]
    assert lines[0]["app_name"] == "pos"
    assert lines[0]["context"] == {"order_id": 4}
    assert lines[1]["error_code"] == "EMPTY_CART"


def test_env_enables_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ODX_TELEMETRY_ENABLED", "true")
    assert TelemetryLogger(app_name="pos").enabled is True
