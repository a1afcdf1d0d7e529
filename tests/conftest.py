"""Shared test fixtures for the PiTools MCP server."""

from __future__ import annotations

import pytest

from pitools_mcp.config.settings import Settings
from tests.helpers import POSTS_URL, USERINFO_URL, FakeProvider, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def linkedin_provider(provider: FakeProvider) -> FakeProvider:
    """Provider with a working userinfo endpoint and default create-post response."""
    provider.add("GET", USERINFO_URL, 200, json={"sub": "abc123", "name": "Ada Lovelace"})
    provider.add("POST", POSTS_URL, 201, headers={"x-restli-id": "urn:li:share:1"})
    return provider
