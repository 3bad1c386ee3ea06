"""
Meta Schemas.

Request and response payloads of the Meta RPC service.
"""

from pydantic import BaseModel, ConfigDict


class Void(BaseModel):
    """Empty request payload for procedures that take no parameters."""

    model_config = ConfigDict(extra="forbid")


class StatusResponse(BaseModel):
    """Server status as human-readable text."""

    info: str


class ConfigResponse(BaseModel):
    """
    Server configuration.

    Only ``app_url`` is interpreted by the client. Any other field the server
    reports is kept as-is so it survives rendering.
    """

    model_config = ConfigDict(extra="allow")

    app_url: str = ""
