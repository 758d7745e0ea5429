from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from order_composer.adapters.outbound.in_memory_catalog import InMemoryCatalog
from order_composer.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from order_composer.config import Settings, load_settings
from order_composer.core.domain.model.order import CatalogEntry, InventoryRef
from order_composer.core.domain.service.compose_order_service import (
    ComposeOrderDeps,
    ComposeOrderService,
)
from order_composer.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from order_composer.core.domain.service.list_orders_service import (
    ListOrdersDeps,
    ListOrdersService,
)
from order_composer.core.domain.service.pricing import ComposerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UseCases:
    compose_order: ComposeOrderService
    get_order: GetOrderService
    list_orders: ListOrdersService


def demo_catalog() -> InMemoryCatalog:
    return InMemoryCatalog.of(
        [
            CatalogEntry(
                reference=InventoryRef("SKU-1"),
                sku="SKU-1",
                display_name="Tote bag",
                unit_of_measure="unit",
                category_reference="merchandising",
                last_purchase_unit_cost=Decimal("2.50"),
            ),
            CatalogEntry(
                reference=InventoryRef("SKU-2"),
                sku="SKU-2",
                display_name="Display stand",
                unit_of_measure="unit",
                category_reference="pos_material",
                last_purchase_unit_cost=Decimal("14.90"),
            ),
        ]
    )


def build_catalog(settings: Settings) -> InMemoryCatalog:
    if settings.catalog_path:
        logger.info("loading catalog from %s", settings.catalog_path)
        return InMemoryCatalog.from_json_file(settings.catalog_path)
    return demo_catalog()


def build_usecases(settings: Settings | None = None) -> UseCases:
    settings = settings or load_settings()
    catalog = build_catalog(settings)
    orders = InMemoryOrderRepository()
    config = ComposerConfig(
        default_currency=settings.default_currency,
        supported_currencies=frozenset(settings.currencies),
    )

    compose_order = ComposeOrderService(
        ComposeOrderDeps(catalog=catalog, orders=orders, config=config)
    )
    get_order = GetOrderService(GetOrderDeps(orders=orders))
    list_orders = ListOrdersService(ListOrdersDeps(orders=orders))

    return UseCases(
        compose_order=compose_order, get_order=get_order, list_orders=list_orders
    )
