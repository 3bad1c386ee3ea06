"""
FastAPI Application Entry Point.

Serves the Meta RPC service that `metactl meta ...` talks to.
"""

from collections.abc import Sequence
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from metactl.backend.api import meta
from metactl.backend.core.config import get_app_config
from metactl.backend.core.exception_handlers import register_exception_handlers
from metactl.backend.core.logging import get_logger, setup_logging
from metactl.backend.schemas.base import utc_now

logger = get_logger(__name__)

DEFAULT_ROUTERS: tuple[APIRouter, ...] = (meta.router,)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    logger.info(
        "Application starting",
        source="api",
        app_name=app_config.application.name,
        env=app_config.application.environment,
    )
    yield
    logger.info("Application shutting down", source="api")


def create_app(routers: Sequence[APIRouter] | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        routers: Routers to mount. None mounts the Meta RPC routes; an empty
            sequence builds a handler that answers 404 for every path.
    """
    app_settings = get_app_config().application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if app_settings.debug else None,
        lifespan=lifespan,
    )
    app.state.started_at = utc_now()

    register_exception_handlers(app)

    for router in DEFAULT_ROUTERS if routers is None else routers:
        app.include_router(router, tags=["meta"])

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn metactl.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
