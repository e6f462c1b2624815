from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from ..clients.base import RemoteRecordClient, keywords, unwrap_result
from ..exceptions import EmptyCartError, NoOpenSessionError
from ..field_values import extract_created_id
from ..models import RequestContext
from ..models_catalog import Product
from ..models_pos import (
    DEFAULT_ORDER_NAME,
    DEFAULT_PAYMENT_METHOD_ID,
    ORDER_MODEL,
    OrderDocument,
    OrderLine,
    OrderPayment,
)

logger = logging.getLogger(__name__)

LINE_QUANTITY = Decimal("1")


class OrderSubmitter:
    def __init__(
        self,
        client: RemoteRecordClient,
        *,
        payment_method_id: int = DEFAULT_PAYMENT_METHOD_ID,
        order_name: str = DEFAULT_ORDER_NAME,
    ) -> None:
        self.client = client
        self.payment_method_id = payment_method_id
        self.order_name = order_name

    def build_order(self, session_id: int, cart: Iterable[Product]) -> OrderDocument:
        lines: list[OrderLine] = []
        total = Decimal("0")
        for product in cart:
            subtotal = product.price * LINE_QUANTITY
            total += subtotal
            lines.append(
                OrderLine(
                    name=product.name,
                    product_id=product.id,
                    price_unit=product.price,
                    qty=LINE_QUANTITY,
                    price_subtotal=subtotal,
                    price_subtotal_incl=subtotal,
                )
            )
        if not lines:
            raise EmptyCartError(code="EMPTY_CART", message="Cart is empty")
        return OrderDocument(
            session_id=session_id,
            name=self.order_name,
            amount_tax=Decimal("0"),
            amount_total=total,
            amount_paid=total,
            amount_return=Decimal("0"),
            state="paid",
            lines=tuple(lines),
            payments=(OrderPayment(amount=total, payment_method_id=self.payment_method_id),),
        )

    async def submit_order(
        self,
        session_id: int | None,
        cart: Iterable[Product],
        context: RequestContext | None = None,
    ) -> int:
        products = list(cart)
        if not products:
            raise EmptyCartError(code="EMPTY_CART", message="Cart is empty")
        if session_id is None:
            raise NoOpenSessionError(
                code="NO_OPEN_SESSION",
                message="No open POS session. Please open the store first.",
            )

        document = self.build_order(session_id, products)
        response = await self.client.create(ORDER_MODEL, [document.to_values()], keywords(context))
        order_id = extract_created_id(unwrap_result(response))
        logger.info(
            "order_created",
            extra={"order_id": order_id, "session_id": session_id, "line_count": len(document.lines)},
        )
        return order_id
