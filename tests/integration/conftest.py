"""
Integration Test Fixtures.

Runs the real FastAPI app in-process: httpx talks to it through
ASGITransport, so the CLI client and the server exercise the full RPC path
without a socket.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from metactl.backend.main import create_app
from metactl.cli.client import CallContext, MetaClient

TEST_BASE_URL = "http://meta.test"


@pytest.fixture
def app() -> FastAPI:
    """Application with the default Meta RPC routes."""
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Raw HTTP client for the app.

    Usage:
        async def test_status(client: AsyncClient):
            response = await client.post("/rpc/Meta.Status", json={})
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=TEST_BASE_URL,
    ) as test_client:
        yield test_client


@pytest.fixture
def meta_client(app: FastAPI) -> MetaClient:
    """MetaClient wired to the in-process app."""
    return MetaClient(transport=ASGITransport(app=app))


@pytest.fixture
def ctx() -> CallContext:
    return CallContext(endpoint=TEST_BASE_URL, timeout=5.0)
