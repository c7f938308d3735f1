"""Exceptions raised by the storefront server."""

from typing import Optional


class StorefrontError(Exception):
    """Base class for storefront errors."""


class ConfigurationError(StorefrontError):
    """Server configuration or stored credentials are missing or invalid."""


class GraphQLError(StorefrontError):
    """The backend call failed or returned errors."""


class PurchaseError(StorefrontError):
    """A purchase step failed. ``message`` is shown to the caller as-is."""

    default_message = "Purchase failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(PurchaseError):
    default_message = "offerId has not been provided"


class UpstreamQueryError(PurchaseError):
    def __init__(self, offer_id: str, reason: str) -> None:
        super().__init__(f"Could not pull data for offer {offer_id}. Error: {reason}")


class OfferNotFound(PurchaseError):
    default_message = "Offer page not found"


class VariantMissing(PurchaseError):
    default_message = "Variant ID not found in offer"


class PriceMissing(PurchaseError):
    default_message = "Offer price not found"


class MalformedOfferPrice(PriceMissing):
    """The offer-price attribute exists but is not a valid price payload."""


class CheckoutCreationFailed(PurchaseError):
    default_message = "Checkout has not been created"


class MetadataUpdateFailed(PurchaseError):
    default_message = "Could not update checkout metadata"


class NoShippingMethodAvailable(PurchaseError):
    default_message = "Shipping method ID not found"


class DeliveryUpdateFailed(PurchaseError):
    default_message = "Could not update delivery"


class CheckoutCompletionFailed(PurchaseError):
    default_message = "Could not complete checkout"


class OrderNotCreated(PurchaseError):
    default_message = "Order ID not found"
