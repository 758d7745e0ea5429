from __future__ import annotations

from typing import Protocol

from returns.result import Result

from order_composer.core.domain.model.errors import OrderError
from order_composer.core.domain.model.order import CatalogEntry, InventoryRef


class CatalogGateway(Protocol):
    async def get_entry(self, reference: InventoryRef) -> Result[CatalogEntry, OrderError]:
        """Failure(UnresolvedReferenceError) when the entry does not exist.

        Must be safe to await concurrently for distinct references.
        """
        ...
