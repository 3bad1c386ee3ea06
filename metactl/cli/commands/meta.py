"""
Meta Commands.

Commands for querying the remote server's meta-information: status text and
configuration. Each command makes exactly one RPC and prints nothing to
stdout unless that call succeeds.

resolve_app_url is the programmatic counterpart of `meta config` for code
that needs the server's application URL rather than a printout.
"""

import asyncio

import typer
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from metactl.backend.core.exceptions import (
    MalformedURLError,
    MissingAttributeError,
    SerializationError,
)
from metactl.backend.schemas.meta import ConfigResponse, Void
from metactl.cli.client import CallContext, MetaClient, RemoteClientProvider
from metactl.cli.registry import CommandRegistry

_APP_URL = TypeAdapter(AnyHttpUrl)


def register_meta_commands(
    registry: CommandRegistry,
    provider: RemoteClientProvider,
) -> CommandRegistry:
    """
    Register `meta`, `meta status` and `meta config` under ``registry``.

    Returns the `meta` group so further meta subcommands can be attached.

    Raises:
        RegistrationError: If any of the names is already taken
    """
    group = registry.add_command("meta", "server meta-information", "", _meta)

    group.add_command(
        "status",
        "server status",
        "The [bold]metactl meta status[/bold] command displays server status information.",
        lambda: asyncio.run(show_status(provider)),
    )
    group.add_command(
        "config",
        "server config",
        "The [bold]metactl meta config[/bold] command displays server config information.",
        lambda: asyncio.run(show_config(provider)),
    )
    return group


def _meta() -> None:
    """Group action; `metactl meta` on its own does nothing."""


async def show_status(provider: RemoteClientProvider) -> None:
    """Print the server's status text."""
    status = await provider.client().status(provider.ctx, Void())
    typer.echo(status.info)


async def show_config(provider: RemoteClientProvider) -> None:
    """Print the endpoint as a comment on stderr, then the server config as JSON."""
    typer.echo(f"# {provider.endpoint.url_or_default()}", err=True)
    config = await provider.client().config(provider.ctx, Void())
    typer.echo(render_config(config))


def render_config(config: ConfigResponse) -> str:
    """
    Render a config response as 2-space indented JSON.

    Raises:
        SerializationError: If a field holds a value JSON cannot represent
    """
    try:
        return config.model_dump_json(indent=2)
    except PydanticSerializationError as e:
        raise SerializationError(f"cannot render server config: {e}") from e


async def resolve_app_url(
    ctx: CallContext,
    client: MetaClient | None = None,
) -> AnyHttpUrl:
    """
    Return the parsed application URL of the server ``ctx`` points at.

    Unlike `meta config`, an unset URL is an error here: callers need a real
    address, not a display value.

    Parsing is strict: the URL must be absolute with an http or https
    scheme. A schemeless value such as ``meta.example.com:3080`` raises
    MalformedURLError rather than parsing as a path.

    Args:
        ctx: Call context; its endpoint names the server in error messages
        client: Meta client to use (a fresh MetaClient when None)

    Raises:
        RPCError: If the config call fails
        MissingAttributeError: If the server reports an empty app_url
        MalformedURLError: If app_url is not an absolute http(s) URL
    """
    client = client or MetaClient()
    config = await client.config(ctx, Void())

    if not config.app_url:
        raise MissingAttributeError("app URL", endpoint=ctx.endpoint)

    try:
        return _APP_URL.validate_python(config.app_url)
    except ValidationError as e:
        raise MalformedURLError(config.app_url, e.errors()[0]["msg"]) from e
