from __future__ import annotations

from typing import Any, Protocol

from ..error_mapper import map_remote_error
from ..models import Domain, KeywordRequest, RequestContext, ServerResponse


class RemoteRecordClient(Protocol):
    async def search_read(self, model: str, domain: Domain, keyword: KeywordRequest) -> ServerResponse:
        ...

    async def create(
        self, model: str, values: list[dict[str, Any]], keyword: KeywordRequest
    ) -> ServerResponse:
        ...

    async def write(
        self, model: str, ids: list[int], values: dict[str, Any], keyword: KeywordRequest
    ) -> ServerResponse:
        ...

    async def call_method(
        self, model: str, method: str, args: list[Any], keyword: KeywordRequest
    ) -> ServerResponse:
        ...


def unwrap_result(response: ServerResponse) -> Any:
    """Return the result, raising the mapped remote error if one is present."""
    if response.error is not None:
        trace_id = str(response.id) if response.id is not None else None
        raise map_remote_error(response.error, trace_id=trace_id)
    return response.result


def keywords(
    context: RequestContext | None = None,
    *,
    fields: list[str] | None = None,
    order: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> KeywordRequest:
    return KeywordRequest(
        fields=fields,
        order=order,
        limit=limit,
        offset=offset,
        context=context or RequestContext(),
    )
