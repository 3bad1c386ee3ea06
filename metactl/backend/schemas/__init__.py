"""
Schemas.

Pydantic models shared by the RPC server and the CLI client.
"""

from metactl.backend.schemas.base import ErrorDetail, ErrorResponse
from metactl.backend.schemas.meta import ConfigResponse, StatusResponse, Void

__all__ = [
    "ConfigResponse",
    "ErrorDetail",
    "ErrorResponse",
    "StatusResponse",
    "Void",
]
