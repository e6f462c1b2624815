from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

CONFIG_MODEL = "pos.config"
SESSION_MODEL = "pos.session"
ORDER_MODEL = "pos.order"

ACTION_SESSION_OPEN = "action_pos_session_open"
ACTION_SESSION_CLOSING_CONTROL = "action_pos_session_closing_control"

DEFAULT_SESSION_NAME = "POS Session (ODX Python)"
DEFAULT_ORDER_NAME = "POS Order (ODX Python)"
DEFAULT_PAYMENT_METHOD_ID = 1


class SessionState(str, Enum):
    CLOSED = "closed"
    OPENING_CONTROL = "opening_control"
    OPENED = "opened"
    CLOSING_CONTROL = "closing_control"


ACTIVE_SESSION_STATES = (SessionState.OPENED, SessionState.OPENING_CONTROL)


@dataclass(frozen=True)
class PosSession:
    id: int
    state: SessionState


class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    product_id: int
    price_unit: Decimal
    qty: Decimal = Decimal("1")
    price_subtotal: Decimal
    price_subtotal_incl: Decimal

    @model_validator(mode="after")
    def _check_subtotal(self) -> "OrderLine":
        if self.price_subtotal != self.price_unit * self.qty:
            raise ValueError("price_subtotal must equal price_unit * qty")
        return self

    def to_values(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "product_id": self.product_id,
            "price_unit": float(self.price_unit),
            "qty": float(self.qty),
            "price_subtotal": float(self.price_subtotal),
            "price_subtotal_incl": float(self.price_subtotal_incl),
        }


class OrderPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    payment_method_id: int = DEFAULT_PAYMENT_METHOD_ID

    def to_values(self) -> dict[str, Any]:
        return {"amount": float(self.amount), "payment_method_id": self.payment_method_id}


class OrderDocument(BaseModel):
    """Write-once composite sent to ``pos.order`` in a single create call."""

    model_config = ConfigDict(frozen=True)

    session_id: int
    name: str = DEFAULT_ORDER_NAME
    amount_tax: Decimal = Decimal("0")
    amount_total: Decimal
    amount_paid: Decimal
    amount_return: Decimal = Decimal("0")
    state: Literal["paid"] = "paid"
    lines: tuple[OrderLine, ...]
    payments: tuple[OrderPayment, ...]

    @model_validator(mode="after")
    def _check_totals(self) -> "OrderDocument":
        if not self.lines:
            raise ValueError("an order needs at least one line")
        line_total = sum((line.price_subtotal for line in self.lines), Decimal("0"))
        if self.amount_total != line_total:
            raise ValueError("amount_total must equal the sum of line subtotals")
        if len(self.payments) != 1:
            raise ValueError("exactly one payment entry is supported")
        if self.payments[0].amount != self.amount_total:
            raise ValueError("payment amount must equal amount_total")
        return self

    def to_values(self) -> dict[str, Any]:
        # one2many fields take (0, 0, values) "create" commands
        return {
            "session_id": self.session_id,
            "name": self.name,
            "amount_tax": float(self.amount_tax),
            "amount_total": float(self.amount_total),
            "amount_paid": float(self.amount_paid),
            "amount_return": float(self.amount_return),
            "state": self.state,
            "lines": [[0, 0, line.to_values()] for line in self.lines],
            "payment_ids": [[0, 0, payment.to_values()] for payment in self.payments],
        }
