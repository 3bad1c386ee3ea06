"""
RPC Client for CLI.

Provides the Meta RPC client and the provider that hands every command the
same configured client and call context.

Each procedure is one HTTP POST of a JSON payload to ``/rpc/<Service.Method>``.
All requests include X-Frontend-ID: cli header for log routing.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from metactl.backend.core.config import Settings, get_client_config, get_settings
from metactl.backend.core.config_schema import ClientSchema
from metactl.backend.core.exceptions import ConfigurationError, RPCError
from metactl.backend.core.logging import get_logger, log_with_source
from metactl.backend.schemas.base import ErrorResponse
from metactl.backend.schemas.meta import ConfigResponse, StatusResponse, Void

logger = get_logger(__name__)

DEFAULT_ENDPOINT_URL = "http://localhost:3080"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def _default_headers() -> dict[str, str]:
    return {"X-Frontend-ID": "cli"}


@dataclass(frozen=True)
class Endpoint:
    """Configured RPC endpoint. ``url`` is None when nothing is configured."""

    url: str | None = None

    def url_or_default(self) -> str:
        """The configured URL, or DEFAULT_ENDPOINT_URL when unset."""
        return (self.url or DEFAULT_ENDPOINT_URL).rstrip("/")


@dataclass(frozen=True)
class CallContext:
    """
    Per-call settings passed to every RPC.

    ``endpoint`` identifies the remote server the call goes to. ``timeout``
    is the deadline for the whole call in seconds; None waits indefinitely.
    """

    endpoint: str
    timeout: float | None = 30.0
    headers: Mapping[str, str] = field(default_factory=_default_headers)


def _error_message(method: str, response: httpx.Response) -> str:
    """Extract the server's error message from a failed RPC response."""
    try:
        detail = ErrorResponse.model_validate_json(response.content).error.message
    except ValidationError:
        detail = response.text.strip() or response.reason_phrase
    return f"{method}: {detail} (HTTP {response.status_code})"


class MetaClient:
    """
    Client for the Meta RPC service.

    Stateless between calls: the endpoint, deadline and headers all come
    from the CallContext, so one client serves any number of servers.

    Usage:
        client = MetaClient()
        status = await client.status(ctx, Void())
        config = await client.config(ctx, Void())
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """
        Initialize the Meta client.

        Args:
            transport: httpx transport override (e.g. ASGITransport or
                MockTransport in tests). None uses the network.
        """
        self._transport = transport

    async def call(
        self,
        ctx: CallContext,
        method: str,
        request: BaseModel,
        response_model: type[ResponseT],
    ) -> ResponseT:
        """
        Invoke one RPC procedure.

        Args:
            ctx: Call context (endpoint, deadline, headers)
            method: Procedure name, e.g. Meta.Status
            request: Request payload
            response_model: Schema the reply is validated against

        Returns:
            The validated response

        Raises:
            RPCError: On transport failure, deadline, non-2xx reply or a
                reply that does not match response_model
        """
        log_with_source(
            logger,
            "cli",
            "debug",
            "RPC request",
            method=method,
            endpoint=ctx.endpoint,
        )

        try:
            async with httpx.AsyncClient(
                base_url=ctx.endpoint,
                timeout=ctx.timeout,
                headers=dict(ctx.headers),
                transport=self._transport,
            ) as client:
                response = await client.post(f"/rpc/{method}", json=request.model_dump())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log_with_source(
                logger,
                "cli",
                "error",
                "RPC request failed",
                method=method,
                endpoint=ctx.endpoint,
                error=str(e),
            )
            raise RPCError(f"{method}: {type(e).__name__}: {e}") from e

        log_with_source(
            logger,
            "cli",
            "debug",
            "RPC response",
            method=method,
            endpoint=ctx.endpoint,
            status_code=response.status_code,
        )

        if response.is_error:
            raise RPCError(_error_message(method, response), status_code=response.status_code)

        try:
            return response_model.model_validate_json(response.content)
        except ValidationError as e:
            raise RPCError(
                f"{method}: invalid response from server: {e.error_count()} validation error(s)",
                status_code=response.status_code,
            ) from e

    async def status(self, ctx: CallContext, request: Void) -> StatusResponse:
        """Meta.Status: server status text."""
        return await self.call(ctx, "Meta.Status", request, StatusResponse)

    async def config(self, ctx: CallContext, request: Void) -> ConfigResponse:
        """Meta.Config: server configuration."""
        return await self.call(ctx, "Meta.Config", request, ConfigResponse)


def _load_client_config() -> ClientSchema:
    """
    Load client.yaml, falling back to defaults outside a project checkout.

    Raises:
        ConfigurationError: If client.yaml exists but fails validation
    """
    try:
        return get_client_config()
    except (RuntimeError, FileNotFoundError) as e:
        log_with_source(
            logger,
            "cli",
            "debug",
            "Client config unavailable, using defaults",
            error=str(e),
        )
        return ClientSchema()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def _load_settings() -> Settings:
    """
    Load METACTL_* overrides.

    Raises:
        ConfigurationError: If an override has the wrong type
    """
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid METACTL_* environment override:\n{e}") from e


class RemoteClientProvider:
    """
    Shared RPC client, endpoint and call context for one process.

    Built once by the CLI bootstrap and handed to every command. Nothing is
    resolved until a command first asks for it, so `--help` and commands
    that never call the server do not read the client configuration.

    Endpoint precedence: explicit endpoint_url (the --endpoint option),
    then METACTL_ENDPOINT, then client.yaml. Timeout follows the same order.
    """

    def __init__(
        self,
        endpoint_url: str | None = None,
        timeout: float | None = None,
        client: MetaClient | None = None,
    ) -> None:
        self._default_endpoint_url = endpoint_url
        self._default_timeout = timeout
        self._endpoint_url = endpoint_url
        self._timeout = timeout
        self._client = client
        self._endpoint: Endpoint | None = None
        self._ctx: CallContext | None = None

    def configure(self, endpoint_url: str | None = None, timeout: float | None = None) -> None:
        """
        Apply the overrides of one invocation.

        Called by the root callback on every run. Options left as None fall
        back to the constructor values, and the endpoint and context are
        resolved again on next access, so an in-process app can be invoked
        repeatedly without one run's --endpoint leaking into the next.
        """
        self._endpoint_url = endpoint_url if endpoint_url is not None else self._default_endpoint_url
        self._timeout = timeout if timeout is not None else self._default_timeout
        self._endpoint = None
        self._ctx = None

    def _resolve(self) -> None:
        """
        Resolve endpoint and context from overrides and configuration.

        Raises:
            ConfigurationError: If METACTL_* or client.yaml is invalid
        """
        settings = _load_settings()
        client_config = _load_client_config()

        url = self._endpoint_url or settings.endpoint or client_config.endpoint
        if self._timeout is not None:
            timeout = self._timeout
        elif settings.timeout is not None:
            timeout = settings.timeout
        else:
            timeout = client_config.timeout_seconds

        self._endpoint = Endpoint(url=url)
        self._ctx = CallContext(
            endpoint=self._endpoint.url_or_default(),
            timeout=timeout or None,
        )
        log_with_source(
            logger,
            "cli",
            "debug",
            "Resolved RPC endpoint",
            endpoint=self._ctx.endpoint,
            configured=url is not None,
            timeout=self._ctx.timeout,
        )

    @property
    def endpoint(self) -> Endpoint:
        """The configured endpoint (resolved on first access)."""
        if self._endpoint is None:
            self._resolve()
        return self._endpoint

    @property
    def ctx(self) -> CallContext:
        """The call context shared by all commands (resolved on first access)."""
        if self._ctx is None:
            self._resolve()
        return self._ctx

    def client(self) -> MetaClient:
        """Get or create the Meta RPC client."""
        if self._client is None:
            self._client = MetaClient()
        return self._client
