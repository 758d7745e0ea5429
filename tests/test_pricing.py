from __future__ import annotations

from decimal import Decimal

import pytest

from order_composer.core.domain.model.order import Money, category_of
from order_composer.core.domain.service.pricing import (
    compute_totals,
    flat_rate_tax,
    resolve_line,
    unit_price_for,
    zero_tax,
)
from order_composer.core.ports.inbound.compose_order import RequestedLine

from conftest import make_entry


def test_money_rounds_half_up_to_minor_unit():
    assert Money.of("2.345").amount == Decimal("2.35")
    assert Money.of("2.344").amount == Decimal("2.34")
    assert Money.of("1234.5", "JPY").amount == Decimal("1235")


def test_money_refuses_mixed_currencies():
    with pytest.raises(ValueError):
        Money.of(1, "EUR") + Money.of(1, "USD")


def test_unit_price_falls_back_to_catalog_then_zero():
    line = RequestedLine(inventory_reference="SKU-1", quantity=Decimal(1))

    assert unit_price_for(line, make_entry("SKU-1", cost="3.10"), "EUR").amount == Decimal("3.10")
    assert unit_price_for(line, make_entry("SKU-1", cost=None), "EUR").amount == Decimal("0.00")


def test_catalog_cost_is_rounded_to_minor_unit():
    line = RequestedLine(inventory_reference="SKU-1", quantity=Decimal(4))

    resolved = resolve_line(line, make_entry("SKU-1", cost="0.1275"), "EUR")

    assert resolved.unit_price.amount == Decimal("0.13")
    assert resolved.line_total.amount == Decimal("0.52")


def test_line_type_is_the_entry_category():
    entry = make_entry("SKU-9", category="finished_good")

    assert category_of(entry) == "finished_good"
    line = RequestedLine(inventory_reference="SKU-9", quantity=Decimal(1))
    assert resolve_line(line, entry, "EUR").line_type == "finished_good"


def test_totals_with_zero_tax():
    entry = make_entry("SKU-1", cost="1.05")
    lines = tuple(
        resolve_line(RequestedLine("SKU-1", Decimal(q)), entry, "EUR") for q in (1, 2, 3)
    )

    totals = compute_totals(lines, "EUR", zero_tax)

    assert totals.subtotal.amount == Decimal("6.30")
    assert totals.taxes.amount == Decimal("0")
    assert totals.total == totals.subtotal


def test_flat_rate_tax_rejects_negative_rate():
    with pytest.raises(ValueError):
        flat_rate_tax("-0.1")
