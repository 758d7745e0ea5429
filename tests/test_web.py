from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from order_composer.adapters.inbound.web.fastapi_app import create_app
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

from conftest import FailingOrderRepository, SlowCatalog, make_entry

HEADERS = {"X-Actor-Id": "u-7", "X-Actor-Name": "Ana"}


def _client(catalog, orders, timeout=None) -> TestClient:
    app = create_app(
        ComposeOrderService(ComposeOrderDeps(catalog=catalog, orders=orders)),
        GetOrderService(GetOrderDeps(orders=orders)),
        ListOrdersService(ListOrdersDeps(orders=orders)),
        compose_timeout_seconds=timeout,
    )
    return TestClient(app)


@pytest.fixture
def client(catalog, orders) -> TestClient:
    return _client(catalog, orders)


def _payload(**overrides):
    body = {
        "account_reference": "A1",
        "account_display_name": "Bar Pepe",
        "channel": "direct",
        "currency": "EUR",
        "lines": [{"inventory_reference": "SKU-1", "quantity": 3}],
    }
    body.update(overrides)
    return body


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_direct_order(client, orders):
    resp = client.post("/orders", json=_payload(), headers=HEADERS)

    assert resp.status_code == 201
    body = resp.json()
    assert body["ok"] is True
    assert body["status"] == "draft"
    assert body["total"] == "7.50"
    assert body["currency"] == "EUR"
    assert resp.headers["Location"] == f"/orders/{body['id']}"
    assert orders.created[0].responsible_id == "u-7"


def test_create_distributor_order(client):
    resp = client.post(
        "/orders",
        json=_payload(channel="distributor", distributor_reference="D9"),
        headers=HEADERS,
    )

    assert resp.status_code == 201
    assert resp.json()["status"] == "registered_for_distributor"


def test_created_order_can_be_read_back(client):
    created = client.post(
        "/orders",
        json=_payload(lines=[
            {"inventory_reference": "SKU-2", "quantity": 2},
            {"inventory_reference": "SKU-1", "quantity": "1.5", "unit_price_override": "4"},
        ]),
        headers=HEADERS,
    ).json()

    detail = client.get(f"/orders/{created['id']}").json()

    assert [ln["inventory_reference"] for ln in detail["lines"]] == ["SKU-2", "SKU-1"]
    assert [ln["line_total"] for ln in detail["lines"]] == ["29.80", "6.00"]
    assert detail["subtotal"] == "35.80"
    assert detail["taxes"] == "0.00"
    assert detail["total"] == "35.80"
    assert detail["created_at"] == detail["updated_at"]
    assert detail["responsible_id"] == "u-7"

    listed = client.get("/orders", params={"account_reference": "A1"}).json()
    assert [item["id"] for item in listed["items"]] == [created["id"]]


def test_unknown_reference_is_reported(client, orders):
    resp = client.post(
        "/orders",
        json=_payload(lines=[{"inventory_reference": "SKU-404", "quantity": 1}]),
        headers=HEADERS,
    )

    assert resp.status_code == 422
    body = resp.json()
    assert body["ok"] is False
    assert body["kind"] == "UnresolvedReferenceError"
    assert body["reference"] == "SKU-404"
    assert orders.created == []


def test_distributor_without_reference_is_rejected(client, orders):
    resp = client.post("/orders", json=_payload(channel="distributor"), headers=HEADERS)

    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "ValidationError"
    assert body["field"] == "distributor_reference"
    assert orders.created == []


@pytest.mark.parametrize(
    "payload, field",
    [
        (_payload(lines=[]), "lines"),
        (_payload(lines=[{"inventory_reference": "SKU-1", "quantity": 0}]), "lines[0].quantity"),
        (_payload(account_reference=""), "account_reference"),
        (_payload(channel="retail"), "channel"),
    ],
)
def test_malformed_requests_report_field_path(client, orders, payload, field):
    resp = client.post("/orders", json=payload, headers=HEADERS)

    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "ValidationError"
    assert body["field"] == field
    assert orders.created == []


def test_missing_actor_header_is_rejected(client, orders):
    resp = client.post("/orders", json=_payload())

    assert resp.status_code == 400
    assert resp.json()["field"] == "X-Actor-Id"
    assert orders.created == []


def test_persistence_failure_is_generic(catalog):
    client = _client(catalog, FailingOrderRepository())

    resp = client.post("/orders", json=_payload(), headers=HEADERS)

    assert resp.status_code == 500
    assert resp.json() == {
        "ok": False,
        "kind": "PersistenceError",
        "message": "order could not be saved",
        "field": None,
        "reference": None,
    }


def test_slow_catalog_times_out_without_writing(orders):
    catalog = SlowCatalog(entries={"SKU-1": make_entry("SKU-1")}, delays={"SKU-1": 1})
    client = _client(catalog, orders, timeout=0.01)

    resp = client.post("/orders", json=_payload(), headers=HEADERS)

    assert resp.status_code == 504
    assert resp.json()["kind"] == "CompositionCancelled"
    assert orders.created == []


def test_get_unknown_order(client):
    resp = client.get("/orders/does-not-exist")

    assert resp.status_code == 404
    assert resp.json()["kind"] == "OrderNotFound"


def test_list_rejects_bad_sort(client):
    resp = client.get("/orders", params={"sort_by": "name"})

    assert resp.status_code == 400
    assert resp.json()["field"] == "sort_by"


def test_oversized_quantity_is_a_field_error(client, orders):
    resp = client.post(
        "/orders",
        json=_payload(lines=[{"inventory_reference": "SKU-1", "quantity": "1e30"}]),
        headers=HEADERS,
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "ValidationError"
    assert body["field"] == "lines[0].quantity"
    assert orders.created == []
