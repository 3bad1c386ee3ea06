"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Logging:
    Every test starts with structlog routed into stdlib logging with no
    handlers attached, so log records never land on stdout, where the
    commands under test write their output.
"""

import logging
from collections.abc import Generator

import pytest
import structlog

from metactl.backend.core.config import get_app_config, get_client_config, get_settings


def _quiet_logging() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def _isolate_logging() -> Generator[None, None, None]:
    """Reset logging before and after each test (CLI runs reconfigure it)."""
    _quiet_logging()
    yield
    _quiet_logging()


@pytest.fixture(autouse=True)
def _clear_config_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Fresh config per test; endpoint overrides from the shell never leak in."""
    monkeypatch.delenv("METACTL_ENDPOINT", raising=False)
    monkeypatch.delenv("METACTL_TIMEOUT", raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    get_client_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
    get_client_config.cache_clear()


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
