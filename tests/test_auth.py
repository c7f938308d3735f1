"""Tests for storefront_server.auth.AuthManager."""

import json
import os
import stat

import pytest

from storefront_server.auth import AuthManager
from storefront_server.errors import ConfigurationError
from storefront_server.models import AuthData

API_URL = "https://shop.example.com/graphql/"


@pytest.fixture
def storage_file(tmp_path):
    return str(tmp_path / "apl.json")


def test_empty_store(storage_file):
    manager = AuthManager(storage_file)
    assert manager.get(API_URL) is None
    assert manager.get_all() == []
    assert not manager.is_installed(API_URL)


def test_set_persists_with_private_permissions(storage_file):
    AuthManager(storage_file).set(AuthData(saleor_api_url=API_URL, token="secret", app_id="app-1"))

    reloaded = AuthManager(storage_file)
    assert reloaded.get(API_URL) == AuthData(saleor_api_url=API_URL, token="secret", app_id="app-1")
    assert stat.S_IMODE(os.stat(storage_file).st_mode) == 0o600


def test_records_are_keyed_by_api_url(storage_file):
    manager = AuthManager(storage_file)
    manager.set(AuthData(saleor_api_url=API_URL, token="one"))
    manager.set(AuthData(saleor_api_url="https://other.example.com/graphql/", token="two"))

    assert manager.get(API_URL).token == "one"
    assert len(manager.get_all()) == 2


def test_delete(storage_file):
    manager = AuthManager(storage_file)
    manager.set(AuthData(saleor_api_url=API_URL, token="secret"))
    manager.delete(API_URL)

    assert AuthManager(storage_file).get(API_URL) is None


def test_corrupted_file_starts_empty(storage_file):
    with open(storage_file, "w") as f:
        f.write("{not json")

    assert AuthManager(storage_file).get_all() == []


def test_load_from_env(storage_file, monkeypatch):
    monkeypatch.setenv("STOREFRONT_APP_TOKEN", "env-token")
    monkeypatch.setenv("STOREFRONT_APP_ID", "app-9")

    manager = AuthManager(storage_file)
    manager.load_from_env(API_URL)

    assert manager.get(API_URL) == AuthData(saleor_api_url=API_URL, token="env-token", app_id="app-9")
    with open(storage_file) as f:
        assert json.load(f)[API_URL]["token"] == "env-token"


def test_load_from_env_without_token(storage_file, monkeypatch):
    monkeypatch.delenv("STOREFRONT_APP_TOKEN", raising=False)

    manager = AuthManager(storage_file)
    manager.load_from_env(API_URL)

    assert not manager.is_installed(API_URL)
    assert not os.path.exists(storage_file)


@pytest.mark.asyncio
async def test_token_provider(storage_file):
    manager = AuthManager(storage_file)
    provide = manager.token_provider(API_URL)

    with pytest.raises(ConfigurationError, match="Is the app installed"):
        await provide()

    manager.set(AuthData(saleor_api_url=API_URL, token="secret"))
    assert await provide() == "secret"
