"""App credential storage keyed by Saleor API URL."""

import json
import os
from pathlib import Path
from typing import Optional
import logging

from .errors import ConfigurationError
from .graphql_client import TokenProvider
from .models import AuthData

logger = logging.getLogger(__name__)


class AuthManager:
    """Stores app tokens per backend URL in a local JSON file."""

    def __init__(self, storage_file: Optional[str] = None) -> None:
        """
        Initialize the credential store.

        Args:
            storage_file: Path to the credentials file. Defaults to ~/.storefront_apl.json
        """
        if storage_file is None:
            storage_file = str(Path.home() / ".storefront_apl.json")
        self.storage_file = storage_file
        self.records: dict[str, AuthData] = self._load()

    def _load(self) -> dict[str, AuthData]:
        """Load stored credentials from file if it exists."""
        if os.path.exists(self.storage_file):
            try:
                with open(self.storage_file, "r") as f:
                    data = json.load(f)
                return {url: AuthData(**record) for url, record in data.items()}
            except (json.JSONDecodeError, ValueError, AttributeError, TypeError) as e:
                logger.warning(f"Could not load credentials from {self.storage_file}: {e}")
        return {}

    def _save(self) -> None:
        """Write stored credentials to file."""
        with open(self.storage_file, "w") as f:
            json.dump({url: record.model_dump() for url, record in self.records.items()}, f, indent=2)
        os.chmod(self.storage_file, 0o600)

    def get(self, api_url: str) -> Optional[AuthData]:
        """Get stored credentials for an API URL."""
        return self.records.get(api_url)

    def set(self, auth_data: AuthData) -> None:
        """Store credentials for the API URL they belong to."""
        self.records[auth_data.saleor_api_url] = auth_data
        self._save()
        logger.info(f"Credentials saved for {auth_data.saleor_api_url}")

    def delete(self, api_url: str) -> None:
        """Remove credentials for an API URL."""
        if self.records.pop(api_url, None) is not None:
            self._save()
            logger.info(f"Credentials removed for {api_url}")

    def get_all(self) -> list[AuthData]:
        """Get all stored credentials."""
        return list(self.records.values())

    def is_installed(self, api_url: str) -> bool:
        """Check whether credentials exist for the API URL."""
        return self.get(api_url) is not None

    def load_from_env(self, api_url: str) -> None:
        """
        Store credentials given through the environment.

        Environment variables:
        - STOREFRONT_APP_TOKEN: App token for the configured API URL
        - STOREFRONT_APP_ID: App ID (optional)
        """
        token = os.environ.get("STOREFRONT_APP_TOKEN")
        if not token:
            logger.debug("No app token found in environment variables")
            return

        self.set(AuthData(saleor_api_url=api_url, token=token, app_id=os.environ.get("STOREFRONT_APP_ID")))
        logger.info("✓ Loaded app token from environment")

    def token_provider(self, api_url: str) -> TokenProvider:
        """Return an async callable that looks up the token for an API URL."""

        async def provide() -> str:
            auth_data = self.get(api_url)
            if not auth_data:
                raise ConfigurationError("No auth data found. Is the app installed?")
            return auth_data.token

        return provide
