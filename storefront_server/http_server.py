"""HTTP server for the storefront: store listing and offer purchase."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .auth import AuthManager
from .catalog import CatalogService
from .config import DEFAULT_BUYER, Settings
from .errors import ConfigurationError, GraphQLError, InvalidRequest
from .graphql_client import GraphQLClient
from .models import PurchaseResult
from .workflow import PurchaseWorkflow

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("storefront-http-server")

# Global state
settings: Optional[Settings] = None
auth_manager: Optional[AuthManager] = None
graphql_client: Optional[GraphQLClient] = None
workflow: PurchaseWorkflow
catalog: CatalogService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global settings, auth_manager, graphql_client, workflow, catalog

    # Startup
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    logger.info(f"Starting Storefront HTTP Server for {settings.api_url}...")

    auth_manager = AuthManager(settings.apl_file)
    auth_manager.load_from_env(settings.api_url)
    if not auth_manager.is_installed(settings.api_url):
        raise ConfigurationError(
            f"No auth data found for {settings.api_url}. Is the app installed? "
            "Set STOREFRONT_APP_TOKEN or add credentials to the APL file."
        )

    graphql_client = GraphQLClient(
        settings.api_url,
        token_provider=auth_manager.token_provider(settings.api_url),
        timeout=settings.http_timeout,
    )
    workflow = PurchaseWorkflow.from_client(graphql_client, channel=settings.channel, buyer=DEFAULT_BUYER)
    catalog = CatalogService(graphql_client, channel=settings.channel, store_page_type=settings.store_page_type)

    yield

    # Shutdown
    logger.info("Shutting down Storefront HTTP Server...")
    await graphql_client.aclose()


app = FastAPI(
    title="Storefront Offers Server",
    description="HTTP API for listing stores and buying offers from a Saleor backend",
    version="0.1.0",
    lifespan=lifespan,
)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Storefront Offers Server",
        "version": "0.1.0",
        "description": "HTTP API for listing stores and buying offers from a Saleor backend",
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "stores": {"list": "GET /stores", "details": "GET /stores/{store_id}"},
            "purchase": "POST /api/add-to-cart",
        },
        "api_url": settings.api_url if settings else None,
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "installed": auth_manager.is_installed(settings.api_url) if auth_manager and settings else False,
    }


# Store endpoints
@app.get("/stores")
async def list_stores():
    """List store pages."""
    try:
        stores = await catalog.list_stores()
    except GraphQLError as e:
        logger.error(f"List stores error: {e}")
        raise HTTPException(status_code=502, detail=f"Error loading stores: {e}")

    return {
        "count": len(stores),
        "stores": [store.model_dump() for store in stores],
    }


@app.get("/stores/{store_id}")
async def get_store(store_id: str):
    """Get a store page with its offers."""
    try:
        store = await catalog.get_store(store_id)
        if store is None:
            raise HTTPException(status_code=404, detail="Store not found")

        offer_pages = await catalog.get_store_offers(store)
        offers = [await catalog.build_store_offer(page) for page in offer_pages]
    except GraphQLError as e:
        logger.error(f"Get store {store_id} error: {e}")
        raise HTTPException(status_code=502, detail=f"Error loading store: {e}")

    return {
        "id": store.id,
        "title": store.title,
        "slug": store.slug,
        "offers": [offer.model_dump(mode="json") for offer in offers],
    }


# Purchase endpoint
@app.post("/api/add-to-cart")
async def add_to_cart(request: Request):
    """Buy an offer at its offer price. Body: {"offerId": "..."}"""
    logger.info("Add to cart has been called")

    try:
        body = await request.json()
    except ValueError:
        body = None

    offer_id = body.get("offerId") if isinstance(body, dict) else None

    if not isinstance(offer_id, str) or not offer_id:
        logger.error("Offer Id has not been specified")
        result = PurchaseResult(error_message=InvalidRequest().message)
    else:
        result = await workflow.run(offer_id)

    return JSONResponse(
        status_code=200 if result.succeeded else 400,
        content=result.to_response(),
    )


def run_http_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """
    Run the HTTP server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to bind to (default: 8000)
        reload: Enable hot reloading (default: False)
    """
    import uvicorn

    logger.info(f"Starting server on {host}:{port} (reload={'enabled' if reload else 'disabled'})")

    if reload:
        uvicorn.run(
            "storefront_server.http_server:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["storefront_server"],
            log_level="info",
        )
    else:
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_http_server(reload=True)
