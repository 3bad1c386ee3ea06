"""
CLI Commands.

Organized by domain/feature area. build_registry assembles the full command
tree; the bootstrap mounts it onto the root Typer app.
"""

from metactl.cli.client import RemoteClientProvider
from metactl.cli.commands.meta import register_meta_commands
from metactl.cli.registry import CommandRegistry


def build_registry(provider: RemoteClientProvider) -> CommandRegistry:
    """
    Build the remote command tree, in the order commands appear in --help.

    Raises:
        RegistrationError: If two commands share a name
    """
    registry = CommandRegistry()
    register_meta_commands(registry, provider)
    return registry


__all__ = [
    "build_registry",
    "register_meta_commands",
]
