"""Read-only catalog lookups used to list stores and their offers."""

import logging
from decimal import Decimal
from typing import Optional

from . import queries
from .config import DEFAULT_CHANNEL
from .errors import PriceMissing
from .graphql_client import GraphQLClient
from .models import Money, Page, Store, StoreOffer
from .offers import get_offer_variant_id, get_raw_offer_price, parse_offer_price

logger = logging.getLogger(__name__)

STORE_OFFERS_ATTRIBUTE = "store-offers"


class CatalogService:
    """Lists store pages and the offers attached to them."""

    def __init__(
        self,
        client: GraphQLClient,
        channel: str = DEFAULT_CHANNEL,
        store_page_type: str = "store",
    ) -> None:
        self.client = client
        self.channel = channel
        self.store_page_type = store_page_type

    async def get_store_page_type_id(self) -> Optional[str]:
        """ID of the first page type matching the store page type name."""
        data = await self.client.execute(
            queries.GET_STORE_PAGE_TYPE,
            {"name": self.store_page_type},
            operation_name="GetStorePageType",
        )
        edges = (data.get("pageTypes") or {}).get("edges") or []
        if not edges:
            logger.warning(f"Page type matching {self.store_page_type!r} not found")
            return None
        return edges[0]["node"]["id"]

    async def list_stores(self) -> list[Store]:
        """All pages of the store page type."""
        page_type_id = await self.get_store_page_type_id()
        if not page_type_id:
            return []

        data = await self.client.execute(
            queries.GET_STORE_PAGES,
            {"pageTypeId": page_type_id},
            operation_name="GetStorePages",
        )
        edges = (data.get("pages") or {}).get("edges") or []
        return [
            Store(id=edge["node"]["id"], title=edge["node"].get("title") or "", slug=edge["node"].get("slug"))
            for edge in edges
        ]

    async def get_store(self, store_id: str) -> Optional[Page]:
        """A store page with its attributes, or None if it does not exist."""
        data = await self.client.execute(
            queries.GET_STORE_PAGE, {"id": store_id}, operation_name="GetStorePage"
        )
        node = data.get("page")
        return Page.from_graphql(node) if node else None

    async def get_store_offers(self, store: Page) -> list[Page]:
        """Offer pages referenced by a store's store-offers attribute."""
        attribute = store.find_attribute(STORE_OFFERS_ATTRIBUTE)
        offer_ids = [value.reference for value in attribute.values if value.reference] if attribute else []
        if not offer_ids:
            return []

        data = await self.client.execute(
            queries.GET_STORE_OFFERS, {"ids": offer_ids}, operation_name="GetStoreOffers"
        )
        edges = (data.get("pages") or {}).get("edges") or []
        return [Page.from_graphql(edge["node"]) for edge in edges]

    async def get_variant_base_price(self, variant_id: str) -> Optional[Money]:
        """Gross list price of a variant in the configured channel."""
        data = await self.client.execute(
            queries.GET_VARIANT,
            {"id": variant_id, "channel": self.channel},
            operation_name="GetVariant",
        )
        variant = data.get("productVariant") or {}
        gross = ((variant.get("pricing") or {}).get("price") or {}).get("gross")
        if not gross:
            return None
        return Money(amount=Decimal(str(gross["amount"])), currency=gross["currency"])

    async def build_store_offer(self, page: Page) -> StoreOffer:
        """Describe an offer for display, tolerating incomplete attributes."""
        variant_id = get_offer_variant_id(page)

        offer_price: Optional[Money] = None
        try:
            offer_price = parse_offer_price(get_raw_offer_price(page))
        except PriceMissing:
            logger.warning(f"Offer {page.id} has no usable offer price")

        base_price = await self.get_variant_base_price(variant_id) if variant_id else None

        return StoreOffer(
            id=page.id,
            title=page.title,
            slug=page.slug,
            content=page.content,
            variant_id=variant_id,
            offer_price=offer_price,
            base_price=base_price,
        )
