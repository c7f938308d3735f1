"""
Purchase workflow: turn an offer ID into a completed order.

Steps run strictly in order, each at most once:

    START -> OFFER_RESOLVED -> CHECKOUT_CREATED -> METADATA_ANNOTATED
          -> DELIVERY_SELECTED -> COMPLETED

The first failing step moves the workflow to FAILED and nothing after it
runs. Side effects of earlier steps are left in place: a checkout created
before a later failure stays on the backend and is not reported.
"""

import logging
from enum import Enum
from typing import Optional

from .checkout import CheckoutService
from .config import DEFAULT_BUYER, DEFAULT_CHANNEL
from .errors import PurchaseError
from .graphql_client import GraphQLClient
from .models import BuyerIdentity, PurchaseResult
from .offers import OfferResolver

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    START = "start"
    OFFER_RESOLVED = "offer_resolved"
    CHECKOUT_CREATED = "checkout_created"
    METADATA_ANNOTATED = "metadata_annotated"
    DELIVERY_SELECTED = "delivery_selected"
    COMPLETED = "completed"
    FAILED = "failed"


class PurchaseRun:
    """State of a single purchase attempt."""

    def __init__(self, offer_id: str) -> None:
        self.offer_id = offer_id
        self.state = WorkflowState.START
        self.checkout_id: Optional[str] = None
        self.shipping_method_id: Optional[str] = None
        self.order_id: Optional[str] = None
        self.error: Optional[PurchaseError] = None

    def advance(self, state: WorkflowState) -> None:
        detail = ""
        if state is WorkflowState.CHECKOUT_CREATED:
            detail = f" (checkout {self.checkout_id})"
        elif state is WorkflowState.DELIVERY_SELECTED:
            detail = f" (shipping method {self.shipping_method_id})"
        logger.info(f"[offer {self.offer_id}] {self.state.value} -> {state.value}{detail}")
        self.state = state

    def fail(self, error: PurchaseError) -> None:
        logger.error(
            f"[offer {self.offer_id}] failed in state {self.state.value}: "
            f"{error.__class__.__name__}: {error.message}"
        )
        if self.checkout_id:
            logger.warning(f"[offer {self.offer_id}] checkout {self.checkout_id} left incomplete")
        self.error = error
        self.state = WorkflowState.FAILED

    def result(self) -> PurchaseResult:
        if self.error is not None:
            return PurchaseResult(error_message=self.error.message)
        return PurchaseResult(order_id=self.order_id)


class PurchaseWorkflow:
    """Sequences the offer lookup and checkout steps for one purchase."""

    def __init__(self, resolver: OfferResolver, checkout: CheckoutService) -> None:
        self.resolver = resolver
        self.checkout = checkout

    @classmethod
    def from_client(
        cls,
        client: GraphQLClient,
        channel: str = DEFAULT_CHANNEL,
        buyer: BuyerIdentity = DEFAULT_BUYER,
    ) -> "PurchaseWorkflow":
        """Build a workflow whose steps share one GraphQL client."""
        return cls(OfferResolver(client), CheckoutService(client, channel=channel, buyer=buyer))

    async def run(self, offer_id: str) -> PurchaseResult:
        """
        Purchase an offer.

        Args:
            offer_id: ID of the offer page

        Returns:
            PurchaseResult with the order ID, or with the message of the first failed step
        """
        run = PurchaseRun(offer_id)
        logger.info(f"Purchase requested for offer {offer_id!r}")

        try:
            offer = await self.resolver.resolve(offer_id)
            run.advance(WorkflowState.OFFER_RESOLVED)

            checkout = await self.checkout.create_checkout(offer.variant_id, offer.price.amount)
            run.checkout_id = checkout.id
            run.advance(WorkflowState.CHECKOUT_CREATED)

            await self.checkout.annotate(checkout.id, offer.offer_id, offer.title)
            run.advance(WorkflowState.METADATA_ANNOTATED)

            run.shipping_method_id = await self.checkout.select_delivery(checkout.id, checkout.shipping_methods)
            run.advance(WorkflowState.DELIVERY_SELECTED)

            run.order_id = await self.checkout.complete(checkout.id)
            run.advance(WorkflowState.COMPLETED)
        except PurchaseError as e:
            run.fail(e)

        if run.state is WorkflowState.COMPLETED:
            logger.info(f"✓ Offer {offer_id} purchased, order {run.order_id}")
        return run.result()
