from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Iterable

from .field_values import as_decimal, as_int, as_label, as_text, field
from .models_catalog import Partner, Product

_EMPTY: Mapping[str, Any] = {}


def _as_record(record: Any) -> Mapping[str, Any]:
    return record if isinstance(record, Mapping) else _EMPTY


def map_partner(record: Any) -> Partner:
    data = _as_record(record)
    return Partner(
        id=as_int(field(data, "id")),
        name=as_text(field(data, "name")),
        email=as_text(field(data, "email")),
        phone=as_text(field(data, "phone")),
        vat=as_text(field(data, "vat")),
        street=as_text(field(data, "street")),
        street2=as_text(field(data, "street2")),
        city=as_text(field(data, "city")),
        country=as_label(field(data, "country_id")),
        is_customer=as_int(field(data, "customer_rank")) > 0,
        is_supplier=as_int(field(data, "supplier_rank")) > 0,
    )


def map_product(record: Any) -> Product:
    data = _as_record(record)
    price = as_decimal(field(data, "list_price"))
    return Product(
        id=as_int(field(data, "id")),
        name=as_text(field(data, "name")),
        price=max(price, Decimal("0")),
        default_code=as_text(field(data, "default_code")),
        quantity=as_decimal(field(data, "qty_available")),
    )


def map_partners(records: Iterable[Any] | None) -> list[Partner]:
    return [map_partner(record) for record in records or ()]


def map_products(records: Iterable[Any] | None) -> list[Product]:
    return [map_product(record) for record in records or ()]
