from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Sequence
from uuid import uuid4

from returns.result import Failure, Result, Success

from order_composer.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    PersistenceError,
)
from order_composer.core.domain.model.order import (
    AccountRef,
    Channel,
    Order,
    OrderId,
    StoredOrder,
)
from order_composer.core.ports.outbound.orders import OrderRepository


def _new_order_id() -> OrderId:
    return OrderId(uuid4().hex)


@dataclass
class InMemoryOrderRepository(OrderRepository):
    _store: Dict[str, StoredOrder] = field(default_factory=dict)
    id_factory: Callable[[], OrderId] = _new_order_id

    async def create(self, order: Order) -> Result[OrderId, OrderError]:
        order_id = self.id_factory()
        if order_id.value in self._store:
            return Failure(PersistenceError(message="order id already exists"))
        self._store[order_id.value] = StoredOrder(order_id=order_id, order=order)
        return Success(order_id)

    async def get(self, order_id: OrderId) -> Result[StoredOrder, OrderError]:
        stored = self._store.get(order_id.value)
        if stored is None:
            return Failure(
                OrderNotFound(message="order not found", order_id=order_id.value)
            )
        return Success(stored)

    async def list(
        self,
        offset: int,
        limit: int,
        account_reference: AccountRef | None = None,
        channel: Channel | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[StoredOrder], OrderError]:
        orders = list(self._store.values())  # insertion order

        if account_reference is not None:
            orders = [o for o in orders if o.order.account_reference == account_reference]
        if channel is not None:
            orders = [o for o in orders if o.order.channel is channel]

        reverse = sort_dir == "desc"

        if sort_by == "created_at":
            orders = sorted(orders, key=lambda o: o.order.created_at, reverse=reverse)
        elif sort_by == "total":
            # amounts only compare within a currency
            orders = sorted(
                orders,
                key=lambda o: (o.order.total.currency, o.order.total.amount),
                reverse=reverse,
            )

        sliced = orders[offset : offset + limit]
        return Success(tuple(sliced))
