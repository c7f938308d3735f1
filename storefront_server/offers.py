"""Offer lookup and attribute extraction."""

import json
import logging
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError

from . import queries
from .errors import (
    GraphQLError,
    InvalidRequest,
    MalformedOfferPrice,
    OfferNotFound,
    PriceMissing,
    UpstreamQueryError,
    VariantMissing,
)
from .graphql_client import GraphQLClient
from .models import Money, Page, ResolvedOffer

logger = logging.getLogger(__name__)

OFFER_VARIANT_ATTRIBUTE = "offer-variant"
OFFER_PRICE_ATTRIBUTE = "offer-price"


def get_offer_variant_id(page: Page) -> Optional[str]:
    """Reference held by the first value of the offer-variant attribute."""
    attribute = page.find_attribute(OFFER_VARIANT_ATTRIBUTE)
    if attribute and attribute.values:
        return attribute.values[0].reference or None
    return None


def get_raw_offer_price(page: Page) -> Optional[str]:
    """Name of the first value of the offer-price attribute (a JSON string)."""
    attribute = page.find_attribute(OFFER_PRICE_ATTRIBUTE)
    if attribute and attribute.values:
        return attribute.values[0].name or None
    return None


def parse_offer_price(raw: Optional[str]) -> Money:
    """
    Decode an offer-price payload such as ``{"amount": 14.99, "currency": "USD"}``.

    A zero amount counts as missing.

    Raises:
        PriceMissing: No payload, or the amount is absent or zero
        MalformedOfferPrice: The payload is not a valid price object
    """
    if not raw:
        raise PriceMissing()

    try:
        data = json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise MalformedOfferPrice() from e

    if not isinstance(data, dict):
        raise MalformedOfferPrice()

    if not data.get("amount"):
        raise PriceMissing()

    try:
        return Money(amount=data["amount"], currency=data.get("currency"))
    except ValidationError as e:
        raise MalformedOfferPrice() from e


class OfferResolver:
    """Fetches an offer page and extracts what checkout needs from it."""

    def __init__(self, client: GraphQLClient) -> None:
        self.client = client

    async def fetch_offer(self, offer_id: str) -> Optional[Page]:
        """Fetch an offer page by ID. Returns None if the backend has no such page."""
        data = await self.client.execute(
            queries.GET_STORE_OFFER, {"id": offer_id}, operation_name="GetStoreOffer"
        )
        node = data.get("page")
        return Page.from_graphql(node) if node else None

    async def resolve(self, offer_id: str) -> ResolvedOffer:
        """
        Resolve an offer ID into its variant and charged price.

        Raises:
            InvalidRequest: Empty offer ID
            UpstreamQueryError: The backend query failed
            OfferNotFound: No page with this ID
            VariantMissing: No offer-variant reference
            PriceMissing: No usable offer-price (MalformedOfferPrice if it cannot be decoded)
        """
        if not offer_id:
            raise InvalidRequest()

        try:
            page = await self.fetch_offer(offer_id)
        except GraphQLError as e:
            logger.error(f"Error while getting offer details for {offer_id}: {e}")
            raise UpstreamQueryError(offer_id, str(e)) from e

        if page is None:
            logger.error(f"Offer page {offer_id} not found")
            raise OfferNotFound()

        variant_id = get_offer_variant_id(page)
        if not variant_id:
            logger.error(f"Variant ID not found in attributes of offer {offer_id}")
            raise VariantMissing()

        try:
            price = parse_offer_price(get_raw_offer_price(page))
        except MalformedOfferPrice:
            logger.error(f"Offer price of {offer_id} could not be decoded")
            raise
        except PriceMissing:
            logger.error(f"Offer price not found in attributes of offer {offer_id}")
            raise

        return ResolvedOffer(offer_id=offer_id, title=page.title, variant_id=variant_id, price=price)
