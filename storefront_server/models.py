"""Data models for storefront and Saleor checkout entities."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Money(BaseModel):
    """An amount in a given currency."""

    amount: Decimal = Field(description="Monetary amount")
    currency: str = Field(description="ISO 4217 currency code")


class AttributeValue(BaseModel):
    """One value of a page attribute."""

    name: Optional[str] = Field(None, description="Plain value (JSON payload for offer-price)")
    reference: Optional[str] = Field(None, description="Referenced object ID (variant, page)")


class PageAttribute(BaseModel):
    """A typed attribute assigned to a page."""

    slug: str = Field(description="Attribute slug, e.g. offer-variant")
    values: list[AttributeValue] = Field(default_factory=list)


class Page(BaseModel):
    """A catalog page (store or offer)."""

    id: str
    title: str = ""
    slug: Optional[str] = None
    content: Optional[str] = None
    attributes: list[PageAttribute] = Field(default_factory=list)

    @classmethod
    def from_graphql(cls, node: dict[str, Any]) -> "Page":
        """Build a page from a GraphQL ``page`` node."""
        attributes = [
            PageAttribute(
                slug=(attr.get("attribute") or {}).get("slug", ""),
                values=[AttributeValue(**value) for value in attr.get("values") or []],
            )
            for attr in node.get("attributes") or []
        ]
        return cls(
            id=node["id"],
            title=node.get("title") or "",
            slug=node.get("slug"),
            content=node.get("content"),
            attributes=attributes,
        )

    def find_attribute(self, slug: str) -> Optional[PageAttribute]:
        """Return the first attribute with the given slug."""
        for attribute in self.attributes:
            if attribute.slug == slug:
                return attribute
        return None


class ResolvedOffer(BaseModel):
    """The facts checkout needs from an offer page."""

    offer_id: str
    title: str
    variant_id: str
    price: Money


class ShippingMethod(BaseModel):
    """A shipping method computed by the backend for a checkout."""

    id: Optional[str] = None
    name: Optional[str] = None


class Checkout(BaseModel):
    """A checkout created on the backend."""

    id: str
    shipping_methods: list[ShippingMethod] = Field(default_factory=list)


class Address(BaseModel):
    """Billing or shipping address."""

    first_name: str
    last_name: str
    street_address_1: str
    city: str
    country_area: str
    postal_code: str
    country: str

    def to_graphql(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "streetAddress1": self.street_address_1,
            "city": self.city,
            "countryArea": self.country_area,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class BuyerIdentity(BaseModel):
    """Buyer details sent with every new checkout."""

    email: str
    billing_address: Address
    shipping_address: Address


class PurchaseResult(BaseModel):
    """Outcome of one purchase: an order ID or an error message, never both."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: Optional[str] = Field(None, alias="orderId")
    error_message: Optional[str] = Field(None, alias="errorMessage")

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "PurchaseResult":
        if bool(self.order_id) == bool(self.error_message):
            raise ValueError("PurchaseResult needs exactly one of order_id or error_message")
        return self

    @property
    def succeeded(self) -> bool:
        return self.order_id is not None

    def to_response(self) -> dict[str, str]:
        """Serialize to the response body shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Store(BaseModel):
    """A store listed on the storefront."""

    id: str
    title: str
    slug: Optional[str] = None


class StoreOffer(BaseModel):
    """An offer as shown on a store page."""

    id: str
    title: str
    slug: Optional[str] = None
    content: Optional[str] = None
    variant_id: Optional[str] = Field(None, description="Referenced product variant")
    offer_price: Optional[Money] = Field(None, description="Price charged at checkout")
    base_price: Optional[Money] = Field(None, description="Variant list price, display only")


class AuthData(BaseModel):
    """Stored app credentials for one backend URL."""

    saleor_api_url: str
    token: str
    app_id: Optional[str] = None
