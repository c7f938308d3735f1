"""MCP Server for the storefront."""

import asyncio
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from .auth import AuthManager
from .catalog import CatalogService
from .config import DEFAULT_BUYER, Settings
from .errors import ConfigurationError, GraphQLError
from .graphql_client import GraphQLClient
from .models import Money
from .workflow import PurchaseWorkflow

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("storefront-mcp-server")

# Initialize server
app = Server("storefront-mcp-server")

# Global state
settings: Settings
catalog: CatalogService
workflow: PurchaseWorkflow


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="storefront_list_stores",
            description="List the stores available on the storefront",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="storefront_get_store",
            description="Show a store with its offers, offer prices and base prices",
            inputSchema={
                "type": "object",
                "properties": {
                    "store_id": {
                        "type": "string",
                        "description": "Store ID from storefront_list_stores",
                    },
                },
                "required": ["store_id"],
            },
        ),
        Tool(
            name="storefront_purchase_offer",
            description="Buy an offer at its offer price (creates and completes a checkout)",
            inputSchema={
                "type": "object",
                "properties": {
                    "offer_id": {
                        "type": "string",
                        "description": "Offer ID from storefront_get_store",
                    },
                },
                "required": ["offer_id"],
            },
        ),
    ]


def _format_money(money: Optional[Money]) -> str:
    if money is None:
        return "??.??"
    return f"{money.amount:.2f} {money.currency}"


async def _list_stores() -> str:
    stores = await catalog.list_stores()
    if not stores:
        return f"No store pages found. Create some pages of type {catalog.store_page_type!r}."

    result_lines = [f"Found {len(stores)} store(s):\n"]
    for i, store in enumerate(stores, 1):
        result_lines.append(f"\n{i}. {store.title}")
        result_lines.append(f"   ID: {store.id}")
        if store.slug:
            result_lines.append(f"   Slug: {store.slug}")
    return "\n".join(result_lines)


async def _get_store(store_id: str) -> str:
    store = await catalog.get_store(store_id)
    if store is None:
        return "Store not found"

    offer_pages = await catalog.get_store_offers(store)
    if not offer_pages:
        return f"{store.title}\n\nThis store has no offers."

    result_lines = [f"{store.title} - {len(offer_pages)} offer(s):\n"]
    for i, page in enumerate(offer_pages, 1):
        offer = await catalog.build_store_offer(page)
        result_lines.append(f"\n{i}. {offer.title}")
        result_lines.append(f"   ID: {offer.id}")
        result_lines.append(f"   Base Price: {_format_money(offer.base_price)}")
        result_lines.append(f"   Offer Price: {_format_money(offer.offer_price)}")
    return "\n".join(result_lines)


async def _purchase_offer(offer_id: str) -> str:
    result = await workflow.run(offer_id)
    if not result.succeeded:
        return f"❌ Purchase failed: {result.error_message}"
    return (
        f"✅ Order created: {result.order_id}\n"
        f"Dashboard: {settings.dashboard_order_url(result.order_id)}"
    )


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    arguments = arguments or {}
    try:
        if name == "storefront_list_stores":
            text = await _list_stores()

        elif name == "storefront_get_store":
            store_id = arguments.get("store_id")
            if not store_id:
                return [TextContent(type="text", text="Error: store_id parameter required")]
            text = await _get_store(store_id)

        elif name == "storefront_purchase_offer":
            text = await _purchase_offer(arguments.get("offer_id") or "")

        else:
            text = f"Unknown tool: {name}"

    except GraphQLError as e:
        logger.error(f"Backend error in tool {name}: {e}")
        text = f"Error: {e}"

    return [TextContent(type="text", text=text)]


async def main() -> None:
    """Main entry point."""
    global settings, catalog, workflow

    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    auth_manager = AuthManager(settings.apl_file)
    auth_manager.load_from_env(settings.api_url)
    if not auth_manager.is_installed(settings.api_url):
        raise ConfigurationError(f"No auth data found for {settings.api_url}. Is the app installed?")

    client = GraphQLClient(
        settings.api_url,
        token_provider=auth_manager.token_provider(settings.api_url),
        timeout=settings.http_timeout,
    )
    catalog = CatalogService(client, channel=settings.channel, store_page_type=settings.store_page_type)
    workflow = PurchaseWorkflow.from_client(client, channel=settings.channel, buyer=DEFAULT_BUYER)

    logger.info(f"Starting Storefront MCP Server for {settings.api_url}...")

    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        await client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
