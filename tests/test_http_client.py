from __future__ import annotations

import json
from dataclasses import replace

import httpx
import pytest

from odx_client_sdk.clients.base import keywords, unwrap_result
from odx_client_sdk.config import ClientConfig, ConfigError
from odx_client_sdk.exceptions import RemoteError, RemoteMissingError, TransportError
from odx_client_sdk.http_client import OdxProxyClient
from odx_client_sdk.models import ServerResponse


def _client(config: ClientConfig, handler) -> OdxProxyClient:
    http = httpx.AsyncClient(base_url=config.gateway_url, transport=httpx.MockTransport(handler))
    return OdxProxyClient(config, http=http)


@pytest.mark.asyncio
async def test_search_read_request_shape(config: ClientConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": "1", "result": [{"id": 1}]})

    client = _client(config, handler)
    response = await client.search_read(
        "pos.config",
        [[["active", "=", True]]],
        keywords(fields=["id"], limit=1, offset=0),
    )

    assert unwrap_result(response) == [{"id": 1}]
    request = seen[0]
    assert request.url == "https://gateway.example.com/api/odoo/execute"
    assert request.headers["X-Api-Key"] == "odx-key"
    body = json.loads(request.content)
    assert body["action"] == "search_read"
    assert body["model_id"] == "pos.config"
    assert body["params"] == [[["active", "=", True]]]
    assert body["fn_name"] is None
    assert body["keyword"] == {
        "fields": ["id"],
        "limit": 1,
        "offset": 0,
        "context": {"allowed_company_ids": [1], "uid": 1, "tz": "Asia/Jakarta", "lang": "en_US"},
    }
    assert body["odoo_instance"] == {
        "url": "https://erp.example.com",
        "user_id": 2,
        "db": "odoo",
        "api_key": "odoo-key",
    }
    assert request.headers["X-Trace-ID"] == body["id"]
    assert client.last_operation is not None
    assert client.last_operation.result == "success"
    await client.aclose()


@pytest.mark.asyncio
async def test_write_and_call_method_params(config: ClientConfig) -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"result": True})

    client = _client(config, handler)
    await client.write("pos.session", [4], {"state": "closing_control"}, keywords())
    await client.call_method("pos.session", "action_pos_session_open", [4], keywords())

    assert bodies[0]["params"] == [[4], {"state": "closing_control"}]
    assert bodies[1]["fn_name"] == "action_pos_session_open"
    assert bodies[1]["params"] == [4]
    assert bodies[1]["keyword"] == {
        "context": {"allowed_company_ids": [1], "uid": 1, "tz": "Asia/Jakarta", "lang": "en_US"}
    }


@pytest.mark.asyncio
async def test_error_envelope_is_returned_not_raised(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "result": None,
                "error": {
                    "code": 200,
                    "message": "Odoo Server Error",
                    "data": {"name": "odoo.exceptions.MissingError", "message": "Record does not exist"},
                },
            },
        )

    client = _client(config, handler)
    response = await client.search_read("pos.session", [], keywords())

    assert not response.ok
    with pytest.raises(RemoteMissingError, match="Record does not exist"):
        unwrap_result(response)
    assert client.last_operation.result == "error"


@pytest.mark.asyncio
async def test_string_error_is_an_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"result": [1], "error": "Invalid API key"})

    response = await _client(config, handler).create("pos.order", [{}], keywords())
    assert response.error is not None
    assert response.error.message == "Invalid API key"


@pytest.mark.asyncio
async def test_http_error_with_envelope_keeps_remote_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "bad domain"}})

    response = await _client(config, handler).search_read("res.partner", [], keywords())
    assert response.error.message == "bad domain"


@pytest.mark.asyncio
async def test_http_error_without_envelope_is_transport_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="unauthorized")

    with pytest.raises(TransportError) as excinfo:
        await _client(config, handler).create("pos.order", [{}], keywords())
    assert excinfo.value.code == "HTTP_401"
    assert excinfo.value.message == "unauthorized"


@pytest.mark.asyncio
async def test_non_json_success_is_transport_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(TransportError) as excinfo:
        await _client(config, handler).search_read("res.partner", [], keywords())
    assert excinfo.value.code == "INVALID_RESPONSE"


@pytest.mark.asyncio
async def test_reads_retry_on_server_errors(config: ClientConfig) -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) == 1:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json={"result": []})

    response = await _client(config, handler).search_read("res.partner", [], keywords())
    assert response.result == []
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_mutations_are_sent_once(config: ClientConfig) -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as excinfo:
        await _client(config, handler).create("pos.session", [{"config_id": 1}], keywords())
    assert excinfo.value.code == "TRANSPORT_ERROR"
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_read_gives_up_after_retries(config: ClientConfig) -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        await _client(config, handler).search_read("res.partner", [], keywords())
    assert len(attempts) == config.retries + 1


def test_client_validates_config(config: ClientConfig) -> None:
    with pytest.raises(ConfigError):
        OdxProxyClient(replace(config, database=""))


@pytest.mark.asyncio
async def test_traceback_string_in_error_data_is_a_remote_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"error": {"code": 200, "message": "Odoo Server Error", "data": "Traceback ..."}},
        )

    response = await _client(config, handler).search_read("res.partner", [], keywords())

    with pytest.raises(RemoteError) as excinfo:
        unwrap_result(response)
    assert type(excinfo.value) is RemoteError
    assert excinfo.value.message == "Odoo Server Error"
    assert excinfo.value.details == {"debug": "Traceback ..."}


@pytest.mark.parametrize("error", [5, ["x"], {}, 0, False, ""])
def test_any_present_error_wins_over_result(error: object) -> None:
    response = ServerResponse.model_validate({"result": [1], "error": error})

    assert response.error is not None
    assert not response.ok
    with pytest.raises(RemoteError) as excinfo:
        unwrap_result(response)
    assert excinfo.value.message


def test_null_error_is_success() -> None:
    assert ServerResponse.model_validate({"result": [1], "error": None}).ok


@pytest.mark.asyncio
async def test_unreadable_envelope_is_transport_error(config: ClientConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": {"nested": True}, "result": []})

    client = _client(config, handler)
    with pytest.raises(TransportError) as excinfo:
        await client.search_read("res.partner", [], keywords())
    assert excinfo.value.code == "INVALID_RESPONSE"
    assert client.last_operation.result == "error"
