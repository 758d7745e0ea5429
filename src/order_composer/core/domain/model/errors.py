from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderError(Exception):
    message: str

    kind = "OrderError"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(OrderError):
    field: str = ""

    kind = "ValidationError"

    def __str__(self) -> str:  # pragma: no cover
        if not self.field:
            return self.message
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class UnresolvedReferenceError(OrderError):
    reference: str = ""

    kind = "UnresolvedReferenceError"

    def __str__(self) -> str:  # pragma: no cover
        return f"unresolved_reference: {self.reference} ({self.message})"


@dataclass(frozen=True)
class PersistenceError(OrderError):
    kind = "PersistenceError"


@dataclass(frozen=True)
class OrderNotFound(PersistenceError):
    order_id: str = ""

    kind = "OrderNotFound"

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class CompositionCancelled(OrderError):
    kind = "CompositionCancelled"
