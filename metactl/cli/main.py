"""
CLI Entry Point.

Builds the root Typer app: global options, the remote command tree from
build_registry, and the local server commands.

Usage:
    metactl --help                                   # Show help

    # Remote meta-information
    metactl meta status                              # Server status text
    metactl meta config                              # Server config as JSON
    metactl -e https://meta.example.com meta config  # Query another server

    # Local server
    metactl server start                             # Start the Meta RPC server

Options:
    --endpoint, -e    RPC endpoint URL (default: METACTL_ENDPOINT, client.yaml)
    --timeout         RPC deadline in seconds (0 disables it)
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

from collections.abc import Callable

import typer
from rich.console import Console

from metactl import __version__
from metactl.backend.core.exceptions import RegistrationError
from metactl.backend.core.logging import setup_cli_logging
from metactl.cli.client import RemoteClientProvider
from metactl.cli.commands import build_registry
from metactl.cli.commands.server import app as server_app
from metactl.cli.registry import CommandRegistry

console = Console(stderr=True)


def build_app(
    provider: RemoteClientProvider | None = None,
    registry_builder: Callable[[RemoteClientProvider], CommandRegistry] = build_registry,
) -> typer.Typer:
    """
    Create the root CLI application.

    Args:
        provider: Shared RPC provider (a fresh one when None)
        registry_builder: Builds the remote command tree for ``provider``

    Raises:
        SystemExit: If the command tree has a duplicate command name
    """
    provider = provider or RemoteClientProvider()

    app = typer.Typer(
        name="metactl",
        help="metactl - remote server meta-information and administration.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )

    @app.callback()
    def main(
        endpoint: str = typer.Option(
            None,
            "--endpoint",
            "-e",
            help="RPC endpoint URL of the remote server.",
        ),
        timeout: float = typer.Option(
            None,
            "--timeout",
            help="RPC deadline in seconds (0 disables it).",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (INFO level logging)",
        ),
        debug: bool = typer.Option(
            False,
            "--debug",
            "-d",
            help="Enable debug mode (DEBUG level logging)",
        ),
    ) -> None:
        """
        metactl - remote server meta-information and administration.

        Queries a server's Meta RPC service and runs the server locally.
        """
        if debug:
            setup_cli_logging(level="DEBUG")
            console.print("[dim]Debug mode enabled[/dim]")
        elif verbose:
            setup_cli_logging(level="INFO")
        else:
            setup_cli_logging()

        provider.configure(endpoint_url=endpoint, timeout=timeout)

    @app.command()
    def version() -> None:
        """
        Display the client version.
        """
        typer.echo(__version__)

    try:
        registry = registry_builder(provider)
    except RegistrationError as e:
        raise SystemExit(f"Error: {e.message}") from e

    registry.mount(app)
    app.add_typer(server_app, name="server")

    return app


app = build_app()


if __name__ == "__main__":
    app()
