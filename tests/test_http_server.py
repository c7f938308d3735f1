"""Tests for the FastAPI app in storefront_server.http_server."""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import graphql_errors, offer_page, offer_reply
from storefront_server import http_server
from storefront_server.catalog import CatalogService


@pytest.fixture
def client(monkeypatch, graphql_client, workflow):
    monkeypatch.setattr(http_server, "workflow", workflow, raising=False)
    monkeypatch.setattr(http_server, "catalog", CatalogService(graphql_client), raising=False)
    return TestClient(http_server.app)


def test_add_to_cart_success(happy_saleor, client):
    response = client.post("/api/add-to-cart", json={"offerId": "off_1", "quantity": 1})

    assert response.status_code == 200
    assert response.json() == {"orderId": "ord_1"}
    assert happy_saleor.variables("UpdateDelivery")["methodId"] == "ship_a"


def test_add_to_cart_missing_offer(fake_saleor, client):
    fake_saleor.on("GetStoreOffer", offer_reply(None))

    response = client.post("/api/add-to-cart", json={"offerId": "off_missing"})

    assert response.status_code == 400
    assert response.json() == {"errorMessage": "Offer page not found"}
    assert fake_saleor.mutations == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {}},
        {"json": {"offerId": ""}},
        {"json": {"offerId": 42}},
        {"json": ["off_1"]},
        {"content": b"offerId=off_1", "headers": {"Content-Type": "application/x-www-form-urlencoded"}},
        {},
    ],
)
def test_add_to_cart_invalid_request(fake_saleor, client, kwargs):
    response = client.post("/api/add-to-cart", **kwargs)

    assert response.status_code == 400
    assert response.json() == {"errorMessage": "offerId has not been provided"}
    assert fake_saleor.calls == []


def test_add_to_cart_upstream_outage_is_400(fake_saleor, client):
    fake_saleor.on("GetStoreOffer", graphql_errors("Service unavailable"))

    response = client.post("/api/add-to-cart", json={"offerId": "off_1"})

    assert response.status_code == 400
    assert response.json() == {"errorMessage": "Could not pull data for offer off_1. Error: Service unavailable"}


def test_add_to_cart_unexpected_upstream_body_is_400(fake_saleor, client):
    fake_saleor.on("GetStoreOffer", httpx.Response(200, json=["unexpected"]))

    response = client.post("/api/add-to-cart", json={"offerId": "off_1"})

    assert response.status_code == 400
    assert response.json() == {"errorMessage": "Could not pull data for offer off_1. Error: Unexpected response shape"}


def test_add_to_cart_step_failure(happy_saleor, client):
    happy_saleor.on("UpdateCheckoutMetadata", graphql_errors("Permission denied"))

    response = client.post("/api/add-to-cart", json={"offerId": "off_1"})

    assert response.status_code == 400
    assert response.json() == {"errorMessage": "Could not update checkout metadata. Error: Permission denied"}
    assert happy_saleor.mutations == ["CreateExampleCheckout", "UpdateCheckoutMetadata"]


def test_list_stores(fake_saleor, client):
    fake_saleor.on("GetStorePageType", {"data": {"pageTypes": {"edges": [{"node": {"id": "pt_1", "name": "Store"}}]}}})
    fake_saleor.on(
        "GetStorePages",
        {"data": {"pages": {"edges": [{"node": {"id": "store_1", "title": "Downtown Store", "slug": "downtown"}}]}}},
    )

    response = client.get("/stores")

    assert response.status_code == 200
    assert response.json() == {
        "count": 1,
        "stores": [{"id": "store_1", "title": "Downtown Store", "slug": "downtown"}],
    }


def test_list_stores_backend_error(fake_saleor, client):
    fake_saleor.on("GetStorePageType", graphql_errors("Service unavailable"))

    response = client.get("/stores")

    assert response.status_code == 502


def test_get_store(fake_saleor, client):
    fake_saleor.on(
        "GetStorePage",
        {
            "data": {
                "page": {
                    "id": "store_1",
                    "title": "Downtown Store",
                    "slug": "downtown",
                    "attributes": [{"attribute": {"slug": "store-offers"}, "values": [{"reference": "off_1"}]}],
                }
            }
        },
    )
    fake_saleor.on("GetStoreOffers", {"data": {"pages": {"edges": [{"node": offer_page()}]}}})
    fake_saleor.on(
        "GetVariant",
        {"data": {"productVariant": {"id": "var_9", "pricing": {"price": {"gross": {"amount": 19.99, "currency": "USD"}}}}}},
    )

    response = client.get("/stores/store_1")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Downtown Store"
    assert len(body["offers"]) == 1
    offer = body["offers"][0]
    assert offer["id"] == "off_1"
    assert offer["variant_id"] == "var_9"
    assert offer["offer_price"] == {"amount": "14.99", "currency": "USD"}
    assert offer["base_price"] == {"amount": "19.99", "currency": "USD"}


def test_get_store_not_found(fake_saleor, client):
    fake_saleor.on("GetStorePage", {"data": {"page": None}})

    response = client.get("/stores/nope")

    assert response.status_code == 404


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
