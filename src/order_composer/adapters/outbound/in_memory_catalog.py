from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable

from returns.result import Failure, Result, Success

from order_composer.core.domain.model.errors import OrderError, UnresolvedReferenceError
from order_composer.core.domain.model.order import CatalogEntry, InventoryRef
from order_composer.core.ports.outbound.catalog import CatalogGateway


@dataclass
class InMemoryCatalog(CatalogGateway):
    entries_by_reference: Dict[str, CatalogEntry]

    @classmethod
    def of(cls, entries: Iterable[CatalogEntry]) -> "InMemoryCatalog":
        return cls({e.reference.value: e for e in entries})

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryCatalog":
        """
        Load a catalog seed file: a JSON list of objects.
        Example:
          [{"reference": "SKU-1", "sku": "SKU-1", "display_name": "Tote bag",
            "unit_of_measure": "unit", "category_reference": "merch",
            "last_purchase_unit_cost": "2.50"}]
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.of(_parse_entry(x) for x in raw)

    async def get_entry(self, reference: InventoryRef) -> Result[CatalogEntry, OrderError]:
        entry = self.entries_by_reference.get(reference.value)
        if entry is None:
            return Failure(
                UnresolvedReferenceError(
                    message="inventory entry not found", reference=reference.value
                )
            )
        return Success(entry)


def _parse_entry(payload: dict[str, Any]) -> CatalogEntry:
    cost = payload.get("last_purchase_unit_cost")
    return CatalogEntry(
        reference=InventoryRef(str(payload["reference"])),
        sku=payload.get("sku"),
        display_name=str(payload.get("display_name", "")),
        unit_of_measure=payload.get("unit_of_measure"),
        category_reference=str(payload.get("category_reference", "")),
        last_purchase_unit_cost=None if cost is None else Decimal(str(cost)),
    )
