"""Shared fixtures: a fake Saleor backend behind httpx.MockTransport."""

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from storefront_server.graphql_client import GraphQLClient
from storefront_server.queries import MUTATIONS
from storefront_server.workflow import PurchaseWorkflow

API_URL = "https://shop.example.com/graphql/"

Reply = Union[dict, httpx.Response, Callable[[dict], Union[dict, httpx.Response]]]


class FakeSaleor:
    """Answers GraphQL operations by operationName and records every call."""

    def __init__(self) -> None:
        self.replies: dict[str, Reply] = {}
        self.calls: list[tuple[str, dict]] = []
        self.requests: list[httpx.Request] = []

    def on(self, operation: str, reply: Reply) -> None:
        self.replies[operation] = reply

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        operation = payload.get("operationName")
        variables = payload.get("variables") or {}
        self.calls.append((operation, variables))
        self.requests.append(request)

        reply = self.replies.get(operation)
        if callable(reply):
            reply = reply(variables)
        if reply is None:
            return httpx.Response(200, json={"errors": [{"message": f"Unexpected operation {operation}"}]})
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    @property
    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]

    @property
    def mutations(self) -> list[str]:
        return [operation for operation in self.operations if operation in MUTATIONS]

    def variables(self, operation: str) -> dict:
        for name, variables in self.calls:
            if name == operation:
                return variables
        raise AssertionError(f"{operation} was not called")


def offer_page(
    offer_id: str = "off_1",
    title: str = "Summer Deal",
    variant_id: Optional[str] = "var_9",
    price: Optional[str] = '{"amount": 14.99, "currency": "USD"}',
    content: Optional[str] = None,
    slug: Optional[str] = None,
) -> dict:
    attributes = []
    if variant_id is not None:
        attributes.append({"attribute": {"slug": "offer-variant"}, "values": [{"name": "Variant", "reference": variant_id}]})
    if price is not None:
        attributes.append({"attribute": {"slug": "offer-price"}, "values": [{"name": price, "reference": None}]})
    return {
        "id": offer_id,
        "title": title,
        "slug": slug,
        "content": content,
        "attributes": attributes,
    }


def offer_reply(page: Optional[dict]) -> dict:
    return {"data": {"page": page}}


def checkout_created(checkout_id: str = "chk_1", methods: Optional[list[str]] = None) -> dict:
    if methods is None:
        methods = ["ship_a", "ship_b"]
    return {
        "data": {
            "checkoutCreate": {
                "checkout": {
                    "id": checkout_id,
                    "shippingMethods": [{"id": method, "name": method.upper()} for method in methods],
                },
                "errors": [],
            }
        }
    }


def metadata_updated(checkout_id: str = "chk_1") -> dict:
    return {"data": {"updateMetadata": {"item": {"id": checkout_id}, "errors": []}}}


def delivery_updated(checkout_id: str = "chk_1") -> dict:
    return {"data": {"checkoutDeliveryMethodUpdate": {"checkout": {"id": checkout_id}, "errors": []}}}


def checkout_completed(order_id: Optional[str] = "ord_1") -> dict:
    order = {"id": order_id} if order_id else None
    return {"data": {"checkoutComplete": {"order": order, "errors": []}}}


def graphql_errors(*messages: str) -> dict:
    return {"errors": [{"message": message} for message in messages], "data": None}


@pytest.fixture
def fake_saleor() -> FakeSaleor:
    return FakeSaleor()


@pytest.fixture
def happy_saleor(fake_saleor: FakeSaleor) -> FakeSaleor:
    """Backend where purchasing off_1 succeeds with order ord_1."""
    fake_saleor.on("GetStoreOffer", offer_reply(offer_page()))
    fake_saleor.on("CreateExampleCheckout", checkout_created())
    fake_saleor.on("UpdateCheckoutMetadata", metadata_updated())
    fake_saleor.on("UpdateDelivery", delivery_updated())
    fake_saleor.on("CompleteCheckout", checkout_completed())
    return fake_saleor


@pytest.fixture
def graphql_client(fake_saleor: FakeSaleor) -> GraphQLClient:
    async def token() -> str:
        return "app-token"

    return GraphQLClient(API_URL, token_provider=token, transport=httpx.MockTransport(fake_saleor.handler))


@pytest.fixture
def workflow(graphql_client: GraphQLClient) -> PurchaseWorkflow:
    return PurchaseWorkflow.from_client(graphql_client, channel="default-channel")
