"""Checkout mutations: create, annotate, pick delivery, complete."""

import logging
from decimal import Decimal
from typing import Optional

from . import queries
from .config import DEFAULT_BUYER, DEFAULT_CHANNEL
from .errors import (
    CheckoutCompletionFailed,
    CheckoutCreationFailed,
    DeliveryUpdateFailed,
    GraphQLError,
    MetadataUpdateFailed,
    NoShippingMethodAvailable,
    OrderNotCreated,
)
from .graphql_client import GraphQLClient
from .models import BuyerIdentity, Checkout, ShippingMethod

logger = logging.getLogger(__name__)


class CheckoutService:
    """Runs the individual checkout mutations against the backend."""

    def __init__(
        self,
        client: GraphQLClient,
        channel: str = DEFAULT_CHANNEL,
        buyer: BuyerIdentity = DEFAULT_BUYER,
    ) -> None:
        """
        Initialize the checkout service.

        Args:
            client: GraphQL client bound to the backend
            channel: Channel slug new checkouts are created in
            buyer: Buyer email and addresses sent with every checkout
        """
        self.client = client
        self.channel = channel
        self.buyer = buyer

    async def create_checkout(self, variant_id: str, amount: Decimal) -> Checkout:
        """
        Create a checkout with one line of the variant at the given price.

        The line price overrides the variant's list price.
        """
        checkout_input = {
            "email": self.buyer.email,
            "billingAddress": self.buyer.billing_address.to_graphql(),
            "shippingAddress": self.buyer.shipping_address.to_graphql(),
            "channel": self.channel,
            "lines": [
                {
                    "quantity": 1,
                    "variantId": variant_id,
                    "price": float(amount),
                }
            ],
        }

        try:
            data = await self.client.execute(
                queries.CREATE_CHECKOUT,
                {"input": checkout_input},
                operation_name="CreateExampleCheckout",
            )
            payload = data.get("checkoutCreate")
            self.client.raise_for_payload_errors(payload)
        except GraphQLError as e:
            logger.error(f"Could not create checkout: {e}")
            raise CheckoutCreationFailed(f"Could not create a new checkout. Error: {e}") from e

        node = (payload or {}).get("checkout")
        if not node or not node.get("id"):
            logger.error("Checkout has not been created")
            raise CheckoutCreationFailed()

        checkout = Checkout(
            id=node["id"],
            shipping_methods=[
                ShippingMethod(**method) if isinstance(method, dict) else ShippingMethod()
                for method in node.get("shippingMethods") or []
            ],
        )
        logger.info(f"Checkout created: {checkout.id} ({len(checkout.shipping_methods)} shipping method(s))")
        return checkout

    async def annotate(self, checkout_id: str, offer_id: str, offer_title: str) -> None:
        """Write offerId and offerName metadata to the checkout."""
        try:
            data = await self.client.execute(
                queries.UPDATE_CHECKOUT_METADATA,
                {
                    "id": checkout_id,
                    "metadata": [
                        {"key": "offerId", "value": offer_id},
                        {"key": "offerName", "value": offer_title},
                    ],
                },
                operation_name="UpdateCheckoutMetadata",
            )
            self.client.raise_for_payload_errors(data.get("updateMetadata"))
        except GraphQLError as e:
            logger.error(f"Could not update metadata of checkout {checkout_id}: {e}")
            raise MetadataUpdateFailed(f"Could not update checkout metadata. Error: {e}") from e

    async def select_delivery(self, checkout_id: str, shipping_methods: list[ShippingMethod]) -> str:
        """
        Set the first shipping method as the checkout's delivery method.

        Returns:
            The selected shipping method ID
        """
        method_id: Optional[str] = shipping_methods[0].id if shipping_methods else None
        if not method_id:
            logger.error(f"No shipping method available for checkout {checkout_id}")
            raise NoShippingMethodAvailable()

        logger.info(f"Setting delivery method {method_id} on checkout {checkout_id}")
        try:
            data = await self.client.execute(
                queries.UPDATE_DELIVERY,
                {"id": checkout_id, "methodId": method_id},
                operation_name="UpdateDelivery",
            )
            self.client.raise_for_payload_errors(data.get("checkoutDeliveryMethodUpdate"))
        except GraphQLError as e:
            logger.error(f"Could not update delivery of checkout {checkout_id}: {e}")
            raise DeliveryUpdateFailed(f"Could not update delivery. Error: {e}") from e

        return method_id

    async def complete(self, checkout_id: str) -> str:
        """
        Complete the checkout.

        Returns:
            ID of the created order
        """
        logger.info(f"Completing checkout {checkout_id}")
        try:
            data = await self.client.execute(
                queries.COMPLETE_CHECKOUT,
                {"id": checkout_id},
                operation_name="CompleteCheckout",
            )
            payload = data.get("checkoutComplete")
            self.client.raise_for_payload_errors(payload)
        except GraphQLError as e:
            logger.error(f"Could not complete checkout {checkout_id}: {e}")
            raise CheckoutCompletionFailed(f"Could not complete checkout. Error: {e}") from e

        order = (payload or {}).get("order") or {}
        order_id = order.get("id")
        if not order_id:
            logger.error(f"Order ID not found after completing checkout {checkout_id}")
            raise OrderNotCreated()

        return order_id
