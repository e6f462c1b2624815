from __future__ import annotations

from ..clients.base import RemoteRecordClient, keywords, unwrap_result
from ..models import RequestContext
from ..models_catalog import (
    PARTNER_FIELDS,
    PARTNER_MODEL,
    PRODUCT_FIELDS,
    PRODUCT_MODEL,
    Partner,
    Product,
)
from ..record_mapper import map_partners, map_products

DEFAULT_PARTNER_LIMIT = 5
DEFAULT_PRODUCT_LIMIT = 20


class CatalogService:
    """Read-only listings of partners and products."""

    def __init__(self, client: RemoteRecordClient) -> None:
        self.client = client

    async def list_partners(
        self,
        *,
        limit: int = DEFAULT_PARTNER_LIMIT,
        offset: int = 0,
        context: RequestContext | None = None,
    ) -> list[Partner]:
        response = await self.client.search_read(
            PARTNER_MODEL,
            [],
            keywords(context, fields=list(PARTNER_FIELDS), limit=limit, offset=offset),
        )
        rows = unwrap_result(response)
        return map_partners(rows if isinstance(rows, list) else None)

    async def list_products(
        self,
        *,
        limit: int = DEFAULT_PRODUCT_LIMIT,
        offset: int = 0,
        context: RequestContext | None = None,
    ) -> list[Product]:
        response = await self.client.search_read(
            PRODUCT_MODEL,
            [],
            keywords(context, fields=list(PRODUCT_FIELDS), limit=limit, offset=offset),
        )
        rows = unwrap_result(response)
        return map_products(rows if isinstance(rows, list) else None)
