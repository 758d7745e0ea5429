from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from order_composer.core.domain.model.errors import OrderError
from order_composer.core.domain.model.order import (
    AccountRef,
    Channel,
    Money,
    OrderId,
    OrderStatus,
)


@dataclass(frozen=True)
class GetOrderQuery:
    order_id: str


@dataclass(frozen=True)
class OrderLineView:
    inventory_reference: str
    sku: str
    display_name: str
    unit_of_measure: str
    line_type: str
    quantity: Decimal
    unit_price: Money
    line_total: Money


@dataclass(frozen=True)
class OrderView:
    order_id: OrderId
    account_reference: AccountRef
    account_display_name: str
    channel: Channel
    distributor_reference: str | None
    status: OrderStatus
    subtotal: Money
    taxes: Money
    total: Money
    notes: str | None
    responsible_id: str
    created_at: datetime
    updated_at: datetime
    lines: Sequence[OrderLineView]


class GetOrderUseCase(Protocol):
    async def get_order(self, query: GetOrderQuery) -> Result[OrderView, OrderError]: ...
