"""
Unit Test Fixtures.

Fixtures for unit tests - the remote server is always stubbed.
Unit tests should be fast and isolated, never touching the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from metactl.backend.schemas.meta import ConfigResponse, StatusResponse
from metactl.cli.client import MetaClient, RemoteClientProvider

TEST_ENDPOINT = "http://meta.test:3080"


# =============================================================================
# RPC Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_meta_client() -> MagicMock:
    """
    Stub Meta RPC client.

    Defaults to a healthy server; override per test:

        mock_meta_client.status.side_effect = RPCError("boom")
        mock_meta_client.config.return_value = ConfigResponse(app_url="")
    """
    client = MagicMock(spec=MetaClient)
    client.status = AsyncMock(return_value=StatusResponse(info="OK"))
    client.config = AsyncMock(
        return_value=ConfigResponse(app_url="https://example.com/", version="1.2.3"),
    )
    return client


@pytest.fixture
def provider(mock_meta_client: MagicMock) -> RemoteClientProvider:
    """Provider pointing at TEST_ENDPOINT and handing out the stub client."""
    return RemoteClientProvider(endpoint_url=TEST_ENDPOINT, timeout=5.0, client=mock_meta_client)
