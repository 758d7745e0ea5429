from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from order_composer.core.domain.model.errors import OrderError
from order_composer.core.domain.model.order import (
    AccountRef,
    Channel,
    Order,
    OrderId,
    StoredOrder,
)


class OrderRepository(Protocol):
    async def create(self, order: Order) -> Result[OrderId, OrderError]:
        """Persist a new order and return the id the store assigned to it."""
        ...

    async def get(self, order_id: OrderId) -> Result[StoredOrder, OrderError]: ...

    async def list(
        self,
        offset: int,
        limit: int,
        account_reference: AccountRef | None = None,
        channel: Channel | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[StoredOrder], OrderError]: ...
