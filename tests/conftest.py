"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, and automatic API
test skipping. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import copy
import logging
import os
from typing import Any

import pytest

from tests.helpers import TWIN_ITEM, FakeTransport

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_hub_env(request, monkeypatch):
    """Ensure a clean hub environment for each test.

    Clears HUBQUERY_* env vars to prevent test pollution.
    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("HUBQUERY_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Return an empty FakeTransport; tests append to ``script``."""
    return FakeTransport()


@pytest.fixture
def twin_item() -> dict[str, Any]:
    """Return a fresh copy of a representative twin document."""
    return copy.deepcopy(TWIN_ITEM)


@pytest.fixture
def hub_credentials() -> tuple[str, str]:
    """Return (host, sas_token) for API tests or skip when unavailable."""
    host = os.getenv("HUBQUERY_HOST")
    token = os.getenv("HUBQUERY_SAS_TOKEN")
    if not host or not token:
        pytest.skip("HUBQUERY_HOST / HUBQUERY_SAS_TOKEN not set")
    return host, token
