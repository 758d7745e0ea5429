from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Tuple

# Currencies without an entry here use two decimal places.
MINOR_UNITS: dict[str, int] = {"JPY": 0, "KWD": 3}


def minor_unit_exponent(currency: str) -> Decimal:
    return Decimal(1).scaleb(-MINOR_UNITS.get(currency, 2))


@dataclass(frozen=True)
class OrderId:
    value: str


@dataclass(frozen=True)
class AccountRef:
    value: str


@dataclass(frozen=True)
class InventoryRef:
    value: str


class Channel(str, Enum):
    DIRECT = "direct"
    DISTRIBUTOR = "distributor"


class OrderStatus(str, Enum):
    DRAFT = "draft"
    REGISTERED_FOR_DISTRIBUTOR = "registered_for_distributor"


@dataclass(frozen=True)
class Actor:
    user_id: str
    display_name: str = ""


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "EUR"

    @staticmethod
    def of(amount: Decimal | int | str, currency: str = "EUR") -> "Money":
        dec = Decimal(str(amount)).quantize(
            minor_unit_exponent(currency), rounding=ROUND_HALF_UP
        )
        return Money(dec, currency)

    @staticmethod
    def zero(currency: str = "EUR") -> "Money":
        return Money.of(0, currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, n: Decimal | int) -> "Money":
        return Money.of(self.amount * Decimal(n), self.currency)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


@dataclass(frozen=True)
class CatalogEntry:
    reference: InventoryRef
    sku: str | None
    display_name: str
    unit_of_measure: str | None
    category_reference: str
    last_purchase_unit_cost: Decimal | None = None


def category_of(entry: CatalogEntry) -> str:
    """The line type of an order line is the category of its catalog entry."""
    return entry.category_reference


@dataclass(frozen=True)
class ResolvedLine:
    inventory_reference: InventoryRef
    quantity: Decimal
    unit_price_override: Decimal | None
    sku: str
    display_name: str
    unit_of_measure: str
    category_reference: str
    line_type: str
    unit_price: Money
    line_total: Money


@dataclass(frozen=True)
class Order:
    account_reference: AccountRef
    account_display_name: str
    channel: Channel
    distributor_reference: str | None
    currency: str
    lines: Tuple[ResolvedLine, ...]
    subtotal: Money
    taxes: Money
    total: Money
    status: OrderStatus
    notes: str | None
    responsible_id: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StoredOrder:
    order_id: OrderId
    order: Order


def fold_money(values: Iterable[Money], currency: str = "EUR") -> Money:
    total = Money.zero(currency)
    for v in values:
        total = total + v
    return total


def status_for(channel: Channel) -> OrderStatus:
    if channel is Channel.DISTRIBUTOR:
        return OrderStatus.REGISTERED_FOR_DISTRIBUTOR
    return OrderStatus.DRAFT


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
