"""
Server Commands.

Commands for running the Meta RPC server locally.
"""

import subprocess
import sys

import typer
from rich.console import Console

from metactl.backend.core.config import get_server_bind

app = typer.Typer(help="Meta RPC server commands")
console = Console()


@app.command()
def start(
    host: str = typer.Option(None, "--host", "-h", help="Server host"),
    port: int = typer.Option(None, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """
    Start the Meta RPC server.

    Examples:
        metactl server start
        metactl server start --reload
        metactl server start --host 0.0.0.0 --port 3080
    """
    try:
        config_host, config_port = get_server_bind()
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        console.print("[red]Error: Could not load server settings.[/red]")
        console.print("[dim]Run from a checkout containing config/settings/application.yaml.[/dim]")
        console.print(f"[dim]Error: {e}[/dim]")
        raise typer.Exit(1)

    server_host = host or config_host
    server_port = port or config_port

    cmd = [
        sys.executable, "-m", "uvicorn",
        "metactl.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    console.print(f"[bold]Starting meta server at http://{server_host}:{server_port}[/bold]")
    if reload:
        console.print("[dim]Auto-reload enabled[/dim]")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        console.print("\n[dim]Server stopped[/dim]")
    except subprocess.CalledProcessError as e:
        console.print(f"[red]Server failed to start (exit code: {e.returncode})[/red]")
        raise typer.Exit(e.returncode)
