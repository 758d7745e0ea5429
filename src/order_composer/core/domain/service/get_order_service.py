from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result

from order_composer.core.domain.model.errors import OrderError, ValidationError
from order_composer.core.domain.model.order import OrderId, StoredOrder
from order_composer.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    OrderLineView,
    OrderView,
)
from order_composer.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class GetOrderDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class GetOrderService(GetOrderUseCase):
    deps: GetOrderDeps

    async def get_order(self, query: GetOrderQuery) -> Result[OrderView, OrderError]:
        order_id = query.order_id.strip()
        if not order_id:
            return Failure(ValidationError("order id is required", field="order_id"))

        found = await self.deps.orders.get(OrderId(order_id))
        return found.map(_to_view)


def _to_view(stored: StoredOrder) -> OrderView:
    order = stored.order
    lines = tuple(
        OrderLineView(
            inventory_reference=li.inventory_reference.value,
            sku=li.sku,
            display_name=li.display_name,
            unit_of_measure=li.unit_of_measure,
            line_type=li.line_type,
            quantity=li.quantity,
            unit_price=li.unit_price,
            line_total=li.line_total,
        )
        for li in order.lines
    )
    return OrderView(
        order_id=stored.order_id,
        account_reference=order.account_reference,
        account_display_name=order.account_display_name,
        channel=order.channel,
        distributor_reference=order.distributor_reference,
        status=order.status,
        subtotal=order.subtotal,
        taxes=order.taxes,
        total=order.total,
        notes=order.notes,
        responsible_id=order.responsible_id,
        created_at=order.created_at,
        updated_at=order.updated_at,
        lines=lines,
    )
