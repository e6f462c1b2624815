"""Loosely-typed remote field values.

Odoo records carry a field as a plain scalar, as ``False`` when the field is
empty, or as an ``[id, label]`` pair for relational fields. Each raw value is
classified once into :data:`FieldValue` and read back through total
extractors that fall back to a type-appropriate default instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Union

from .exceptions import MalformedResponseError


@dataclass(frozen=True)
class Missing:
    pass


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class Pair:
    id: int
    label: str


FieldValue = Union[Missing, Scalar, Pair]

MISSING = Missing()
_ZERO = Decimal("0")
# Ids and amounts never need more; larger magnitudes read as the default.
_MAX_INTEGER_DIGITS = 30


def classify(raw: Any) -> FieldValue:
    if raw is None or raw is False:
        return MISSING
    if raw is True:
        return Scalar("true")
    if isinstance(raw, str):
        return Scalar(raw)
    if isinstance(raw, (int, float, Decimal)):
        try:
            return Scalar(str(raw))
        except ValueError:
            # int above sys.get_int_max_str_digits()
            return MISSING
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return Pair(id=as_int(classify(raw[0])), label=as_text(classify(raw[1])))
    return MISSING


def field(record: Mapping[str, Any], name: str) -> FieldValue:
    return classify(record.get(name))


def as_text(value: FieldValue) -> str:
    if isinstance(value, Scalar):
        return value.text
    return ""


def as_decimal(value: FieldValue) -> Decimal:
    if not isinstance(value, Scalar):
        return _ZERO
    try:
        parsed = Decimal(value.text.strip())
    except InvalidOperation:
        return _ZERO
    if not parsed.is_finite() or parsed.adjusted() > _MAX_INTEGER_DIGITS:
        return _ZERO
    return parsed


def as_int(value: FieldValue) -> int:
    # Decimal keeps exponent notation cheap; int() only sees bounded magnitudes.
    return int(as_decimal(value))


def as_label(value: FieldValue) -> str:
    if isinstance(value, Pair):
        return value.label
    return ""


def extract_created_id(result: Any) -> int:
    """Return the id of a freshly created record.

    The gateway answers a create call with either the bare id or a
    one-element list wrapping it, depending on the remote version.
    """
    raw = result
    if isinstance(result, (list, tuple)):
        if len(result) != 1:
            raise MalformedResponseError(
                code="MALFORMED_CREATE_RESPONSE",
                message=f"Expected a single created id, got {len(result)} values",
                details={"result": list(result)},
            )
        raw = result[0]
    created_id = _parse_id(raw)
    if created_id is None or created_id <= 0:
        raise MalformedResponseError(
            code="MALFORMED_CREATE_RESPONSE",
            message=f"Could not read a record id from {result!r}",
            details={"result": result},
        )
    return created_id


def _parse_id(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None
