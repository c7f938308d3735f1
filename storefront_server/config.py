"""
Server configuration.

Settings are read from environment variables:
  STOREFRONT_API_URL         Saleor GraphQL endpoint (required)
  STOREFRONT_CHANNEL         Channel slug checkouts are created in (default: default-channel)
  STOREFRONT_HTTP_TIMEOUT    Backend request timeout in seconds (default: 30)
  STOREFRONT_APL_FILE        Credentials file (default: ~/.storefront_apl.json)
  STOREFRONT_STORE_PAGE_TYPE Name of the page type used for stores (default: store)
  STOREFRONT_LOG_LEVEL       Logging level (default: INFO)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .models import Address, BuyerIdentity

DEFAULT_CHANNEL = "default-channel"

# TODO: replace with buyer details captured from the visitor once checkout collects them.
DEFAULT_ADDRESS = Address(
    first_name="John",
    last_name="Doe",
    street_address_1="813 Howard Street",
    city="Oswego",
    country_area="NY",
    postal_code="13126",
    country="US",
)

DEFAULT_BUYER = BuyerIdentity(
    email="demo@saleor.io",
    billing_address=DEFAULT_ADDRESS,
    shipping_address=DEFAULT_ADDRESS,
)


class Settings(BaseModel):
    """Runtime settings for the storefront server."""

    api_url: str = Field(description="Saleor GraphQL endpoint URL")
    channel: str = Field(default=DEFAULT_CHANNEL, description="Channel slug")
    http_timeout: float = Field(default=30.0, gt=0, description="Backend request timeout in seconds")
    apl_file: Optional[str] = Field(default=None, description="Credentials file path")
    store_page_type: str = Field(default="store", description="Page type name for stores")
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        api_url = os.environ.get("STOREFRONT_API_URL", "").strip()
        if not api_url:
            raise ConfigurationError("STOREFRONT_API_URL is not configured")

        timeout = os.environ.get("STOREFRONT_HTTP_TIMEOUT", "30")
        try:
            http_timeout = float(timeout)
        except ValueError as e:
            raise ConfigurationError(f"Invalid STOREFRONT_HTTP_TIMEOUT: {timeout}") from e

        try:
            return cls(
                api_url=api_url,
                channel=os.environ.get("STOREFRONT_CHANNEL") or DEFAULT_CHANNEL,
                http_timeout=http_timeout,
                apl_file=os.environ.get("STOREFRONT_APL_FILE") or None,
                store_page_type=os.environ.get("STOREFRONT_STORE_PAGE_TYPE") or "store",
                log_level=(os.environ.get("STOREFRONT_LOG_LEVEL") or "INFO").upper(),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    @property
    def dashboard_url(self) -> str:
        """Root URL of the Saleor instance (API URL without the /graphql/ suffix)."""
        root = self.api_url.rstrip("/")
        if root.endswith("/graphql"):
            root = root[: -len("/graphql")]
        return root

    def dashboard_order_url(self, order_id: str) -> str:
        """Dashboard page of an order."""
        return f"{self.dashboard_url}/dashboard/orders/{order_id}"
