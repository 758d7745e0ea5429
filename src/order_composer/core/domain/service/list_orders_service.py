from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result

from order_composer.core.domain.model.errors import OrderError, ValidationError
from order_composer.core.domain.model.order import AccountRef, Channel, StoredOrder
from order_composer.core.ports.inbound.list_orders import (
    ListOrdersQuery,
    ListOrdersUseCase,
    OrderSummaryView,
)
from order_composer.core.ports.outbound.orders import OrderRepository

MAX_LIMIT = 100


@dataclass(frozen=True)
class ListOrdersDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class ListOrdersService(ListOrdersUseCase):
    deps: ListOrdersDeps

    async def list_orders(
        self, query: ListOrdersQuery
    ) -> Result[Sequence[OrderSummaryView], OrderError]:
        if query.offset < 0:
            return Failure(ValidationError("offset must be >= 0", field="offset"))
        if query.limit <= 0:
            return Failure(ValidationError("limit must be > 0", field="limit"))
        if query.limit > MAX_LIMIT:
            return Failure(
                ValidationError(f"limit must be <= {MAX_LIMIT}", field="limit")
            )

        account: AccountRef | None = None
        if query.account_reference is not None:
            ref = query.account_reference.strip()
            if not ref:
                return Failure(
                    ValidationError(
                        "account_reference must be non-empty when provided",
                        field="account_reference",
                    )
                )
            account = AccountRef(ref)

        channel: Channel | None = None
        if query.channel is not None:
            try:
                channel = Channel(query.channel)
            except ValueError:
                return Failure(
                    ValidationError(
                        "channel must be 'direct' or 'distributor'", field="channel"
                    )
                )

        if query.sort_by not in {"created_at", "total"}:
            return Failure(
                ValidationError(
                    "sort_by must be one of: created_at, total", field="sort_by"
                )
            )
        if query.sort_dir not in {"asc", "desc"}:
            return Failure(
                ValidationError("sort_dir must be 'asc' or 'desc'", field="sort_dir")
            )

        listed = await self.deps.orders.list(
            query.offset,
            query.limit,
            account_reference=account,
            channel=channel,
            sort_by=query.sort_by,
            sort_dir=query.sort_dir,
        )
        return listed.map(_to_summaries)


def _to_summaries(orders: Sequence[StoredOrder]) -> Sequence[OrderSummaryView]:
    return tuple(
        OrderSummaryView(
            order_id=s.order_id,
            account_reference=s.order.account_reference,
            account_display_name=s.order.account_display_name,
            channel=s.order.channel,
            status=s.order.status,
            total=s.order.total,
            created_at=s.order.created_at,
        )
        for s in orders
    )
