"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends, Request

from metactl.backend.core.config import get_app_config
from metactl.backend.services.meta import MetaService


def get_meta_service(request: Request) -> MetaService:
    """Build the meta service for the application handling this request."""
    return MetaService(get_app_config(), started_at=request.app.state.started_at)


MetaServiceDep = Annotated[MetaService, Depends(get_meta_service)]
