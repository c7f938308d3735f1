"""Async GraphQL client for the Saleor API."""

import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from . import queries
from .errors import GraphQLError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]


def _join_error_messages(errors: Any) -> str:
    """Flatten a GraphQL ``errors`` value into one message."""
    if not isinstance(errors, list):
        errors = [errors]
    messages = []
    for error in errors:
        if not isinstance(error, dict):
            messages.append(str(error))
            continue
        message = error.get("message") or error.get("code") or "Unknown error"
        field = error.get("field")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages)


class GraphQLClient:
    """Client for executing GraphQL operations against a Saleor backend."""

    def __init__(
        self,
        api_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the GraphQL client.

        Args:
            api_url: Full GraphQL endpoint URL (e.g. https://shop.example.com/graphql/)
            token_provider: Async callable returning the app token. None for anonymous reads.
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests to fake the backend)
        """
        self.api_url = api_url
        self.token_provider = token_provider
        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def _auth_headers(self) -> dict[str, str]:
        if self.token_provider is None:
            return {}
        token = await self.token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL operation.

        Args:
            query: GraphQL document
            variables: Operation variables
            operation_name: Name of the operation in the document

        Returns:
            The ``data`` portion of the response

        Raises:
            GraphQLError: On transport failure, non-2xx status, or a response ``errors`` array
        """
        payload: dict[str, Any] = {"query": query, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        headers = await self._auth_headers()
        kind = "mutation" if operation_name in queries.MUTATIONS else "query"
        logger.debug(f"GraphQL {kind} {operation_name or '(anonymous)'} -> {self.api_url}")

        try:
            response = await self.client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            raise GraphQLError(f"HTTP {e.response.status_code} from {self.api_url}") from e
        except httpx.HTTPError as e:
            raise GraphQLError(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise GraphQLError(f"Invalid JSON response: {e}") from e

        if not isinstance(result, dict):
            raise GraphQLError("Unexpected response shape")

        errors = result.get("errors")
        if errors:
            raise GraphQLError(_join_error_messages(errors))

        data = result.get("data") or {}
        if not isinstance(data, dict):
            raise GraphQLError("Unexpected response shape")
        return data

    @staticmethod
    def raise_for_payload_errors(payload: Optional[dict[str, Any]]) -> None:
        """Raise GraphQLError if a mutation payload reports errors."""
        if payload is None:
            return
        if not isinstance(payload, dict):
            raise GraphQLError("Unexpected response shape")
        errors = payload.get("errors")
        if errors:
            raise GraphQLError(_join_error_messages(errors))

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
