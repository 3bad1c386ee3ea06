"""
Meta RPC Endpoints.

Each procedure of the Meta service is one POST route taking a JSON body.

Endpoints:
- /rpc/Meta.Status: Server status text
- /rpc/Meta.Config: Server configuration (application URL and identity)
"""

from fastapi import APIRouter

from metactl.backend.core.dependencies import MetaServiceDep
from metactl.backend.schemas.meta import ConfigResponse, StatusResponse, Void

router = APIRouter()


@router.post("/rpc/Meta.Status", response_model=StatusResponse)
async def meta_status(payload: Void, service: MetaServiceDep) -> StatusResponse:
    """Report server status."""
    return service.status()


@router.post("/rpc/Meta.Config", response_model=ConfigResponse)
async def meta_config(payload: Void, service: MetaServiceDep) -> ConfigResponse:
    """Report server configuration."""
    return service.config()
