from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
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
class ListOrdersQuery:
    offset: int = 0
    limit: int = 50
    account_reference: str | None = None
    channel: str | None = None
    sort_by: str = "created_at"  # created_at | total
    sort_dir: str = "desc"  # asc | desc


@dataclass(frozen=True)
class OrderSummaryView:
    order_id: OrderId
    account_reference: AccountRef
    account_display_name: str
    channel: Channel
    status: OrderStatus
    total: Money
    created_at: datetime


class ListOrdersUseCase(Protocol):
    async def list_orders(
        self, query: ListOrdersQuery
    ) -> Result[Sequence[OrderSummaryView], OrderError]: ...
