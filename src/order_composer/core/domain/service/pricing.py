"""Line pricing and order totals.

Every monetary value is quantized to the currency's minor unit with
ROUND_HALF_UP at the moment it is produced: the unit price, then each line
total. Order sums add already-quantized amounts and are therefore exact.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, FrozenSet, Sequence, Tuple

from order_composer.core.domain.model.order import (
    CatalogEntry,
    Money,
    ResolvedLine,
    category_of,
    fold_money,
)
from order_composer.core.ports.inbound.compose_order import RequestedLine

TaxPolicy = Callable[[Sequence[ResolvedLine], str], Money]

DEFAULT_SKU = "N/A"
DEFAULT_UNIT_OF_MEASURE = "unit"


def zero_tax(lines: Sequence[ResolvedLine], currency: str) -> Money:
    return Money.zero(currency)


def flat_rate_tax(rate: Decimal | str) -> TaxPolicy:
    """Tax every line at the same rate, rounded once on the subtotal."""
    rate = Decimal(str(rate))
    if rate < 0:
        raise ValueError("tax rate must be >= 0")

    def policy(lines: Sequence[ResolvedLine], currency: str) -> Money:
        base = fold_money((ln.line_total for ln in lines), currency=currency)
        return Money.of(base.amount * rate, currency)

    return policy


@dataclass(frozen=True)
class ComposerConfig:
    default_currency: str = "EUR"
    tax_policy: TaxPolicy = zero_tax
    supported_currencies: FrozenSet[str] = field(
        default_factory=lambda: frozenset({"EUR", "USD", "GBP"})
    )

    def __post_init__(self) -> None:
        if self.default_currency not in self.supported_currencies:
            raise ValueError(
                f"default currency {self.default_currency} is not supported"
            )


@dataclass(frozen=True)
class Totals:
    subtotal: Money
    taxes: Money
    total: Money


def unit_price_for(
    line: RequestedLine, entry: CatalogEntry, currency: str
) -> Money:
    if line.unit_price_override is not None:
        return Money.of(line.unit_price_override, currency)
    if entry.last_purchase_unit_cost is not None:
        return Money.of(entry.last_purchase_unit_cost, currency)
    return Money.zero(currency)


def resolve_line(line: RequestedLine, entry: CatalogEntry, currency: str) -> ResolvedLine:
    unit_price = unit_price_for(line, entry, currency)
    quantity = Decimal(str(line.quantity))
    override = line.unit_price_override
    return ResolvedLine(
        inventory_reference=entry.reference,
        quantity=quantity,
        unit_price_override=None if override is None else Decimal(str(override)),
        sku=entry.sku or DEFAULT_SKU,
        display_name=entry.display_name,
        unit_of_measure=entry.unit_of_measure or DEFAULT_UNIT_OF_MEASURE,
        category_reference=entry.category_reference,
        line_type=category_of(entry),
        unit_price=unit_price,
        line_total=unit_price * quantity,
    )


def compute_totals(
    lines: Tuple[ResolvedLine, ...], currency: str, tax_policy: TaxPolicy
) -> Totals:
    subtotal = fold_money((ln.line_total for ln in lines), currency=currency)
    taxes = tax_policy(lines, currency)
    return Totals(subtotal=subtotal, taxes=taxes, total=subtotal + taxes)
