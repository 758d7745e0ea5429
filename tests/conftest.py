from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List

import pytest
from returns.result import Failure, Result, Success

from order_composer.adapters.outbound.in_memory_catalog import InMemoryCatalog
from order_composer.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from order_composer.core.domain.model.errors import (
    OrderError,
    PersistenceError,
    UnresolvedReferenceError,
)
from order_composer.core.domain.model.order import (
    CatalogEntry,
    InventoryRef,
    Order,
    OrderId,
)
from order_composer.core.domain.service.compose_order_service import (
    ComposeOrderDeps,
    ComposeOrderService,
)

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_entry(
    reference: str,
    cost: str | None = "2.50",
    sku: str | None = None,
    category: str = "merchandising",
    uom: str | None = "unit",
) -> CatalogEntry:
    return CatalogEntry(
        reference=InventoryRef(reference),
        sku=reference if sku is None else sku,
        display_name=f"Item {reference}",
        unit_of_measure=uom,
        category_reference=category,
        last_purchase_unit_cost=None if cost is None else Decimal(cost),
    )


@dataclass
class SlowCatalog:
    """Catalog whose lookups settle after a per-reference delay."""

    entries: Dict[str, CatalogEntry]
    delays: Dict[str, float] = field(default_factory=dict)
    requested: List[str] = field(default_factory=list)
    settled: List[str] = field(default_factory=list)

    async def get_entry(self, reference: InventoryRef) -> Result[CatalogEntry, OrderError]:
        self.requested.append(reference.value)
        await asyncio.sleep(self.delays.get(reference.value, 0))
        self.settled.append(reference.value)
        entry = self.entries.get(reference.value)
        if entry is None:
            return Failure(
                UnresolvedReferenceError(
                    message="inventory entry not found", reference=reference.value
                )
            )
        return Success(entry)


@dataclass
class RecordingOrderRepository(InMemoryOrderRepository):
    created: List[Order] = field(default_factory=list)

    async def create(self, order: Order) -> Result[OrderId, OrderError]:
        self.created.append(order)
        return await super().create(order)


@dataclass
class FailingOrderRepository(InMemoryOrderRepository):
    attempts: int = 0

    async def create(self, order: Order) -> Result[OrderId, OrderError]:
        self.attempts += 1
        return Failure(PersistenceError(message="write rejected by store"))


@pytest.fixture
def entries() -> Dict[str, CatalogEntry]:
    return {
        "SKU-1": make_entry("SKU-1", cost="2.50"),
        "SKU-2": make_entry("SKU-2", cost="14.90", category="pos_material"),
        "SKU-3": make_entry("SKU-3", cost=None, sku="", uom=None),
    }


@pytest.fixture
def catalog(entries) -> InMemoryCatalog:
    return InMemoryCatalog(dict(entries))


@pytest.fixture
def orders() -> RecordingOrderRepository:
    return RecordingOrderRepository()


@pytest.fixture
def service(catalog, orders) -> ComposeOrderService:
    return ComposeOrderService(
        ComposeOrderDeps(catalog=catalog, orders=orders, clock=lambda: FIXED_NOW)
    )


@pytest.fixture
def run():
    return asyncio.run
