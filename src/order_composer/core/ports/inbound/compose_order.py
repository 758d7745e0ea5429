from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from order_composer.core.domain.model.errors import OrderError
from order_composer.core.domain.model.order import (
    AccountRef,
    Actor,
    Money,
    OrderId,
    OrderStatus,
)


@dataclass(frozen=True)
class RequestedLine:
    inventory_reference: str
    quantity: Decimal
    unit_price_override: Decimal | None = None


@dataclass(frozen=True)
class ComposeOrderCommand:
    account_reference: str
    account_display_name: str
    channel: str
    lines: Sequence[RequestedLine]
    distributor_reference: str | None = None
    currency: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class OrderReceipt:
    order_id: OrderId
    account_reference: AccountRef
    status: OrderStatus
    total: Money


class ComposeOrderUseCase(Protocol):
    async def compose_order(
        self, command: ComposeOrderCommand, actor: Actor
    ) -> Result[OrderReceipt, OrderError]: ...
