"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio

from apimanager import ApiManager, ManagerConfig, TransportConfig, create_manager
from tests.helpers.mock_api import BASE_URL, MockApi


def _accept_ok_or_bad_request(status: int) -> bool:
    return status in {200, 400}


@pytest.fixture
def mock_api() -> MockApi:
    """Return a fresh in-memory API."""
    return MockApi()


@pytest.fixture
def transport_config() -> TransportConfig:
    """Return a transport config accepting 200 and 400 responses."""
    return TransportConfig(
        base_url=BASE_URL,
        headers={},
        timeout_ms=10_000,
        status_accepted=_accept_ok_or_bad_request,
    )


@pytest_asyncio.fixture
async def manager(
    mock_api: MockApi, transport_config: TransportConfig
) -> typ.AsyncIterator[ApiManager]:
    """Yield a manager routed to the in-memory API."""
    api_manager = create_manager(
        ManagerConfig(transport=transport_config),
        transport=mock_api.transport,
    )
    try:
        yield api_manager
    finally:
        await api_manager.aclose()
