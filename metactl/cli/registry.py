"""
Command Registry.

A tree of named commands assembled at startup and mounted onto a Typer app.

Building the tree is separate from mounting it, so a duplicate name fails
loudly at startup (RegistrationError) instead of silently replacing an
existing command, and the tree can be inspected in tests without Typer.

Usage:
    registry = CommandRegistry()
    meta = registry.add_command("meta", "server meta-information", "", noop)
    meta.add_command("status", "server status", "Long help...", show_status)
    registry.mount(app)
"""

from collections.abc import Callable
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.markup import escape

from metactl.backend.core.exceptions import ApplicationError, RegistrationError
from metactl.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

Action = Callable[[], None]


@dataclass(frozen=True)
class Command:
    """A registered command. ``long_help`` may contain Rich markup."""

    name: str
    short_desc: str
    long_help: str
    action: Action

    @property
    def help(self) -> str:
        return self.long_help or self.short_desc


class CommandRegistry:
    """
    A node in the command tree.

    The root node has no command of its own; every other node wraps one
    Command and may hold children, which makes it a command group.
    """

    def __init__(self, command: Command | None = None, path: tuple[str, ...] = ()) -> None:
        self._command = command
        self._path = path
        self._children: dict[str, CommandRegistry] = {}

    @property
    def command(self) -> Command | None:
        return self._command

    @property
    def path(self) -> tuple[str, ...]:
        return self._path

    @property
    def commands(self) -> tuple["CommandRegistry", ...]:
        """Children in registration order."""
        return tuple(self._children.values())

    def add_command(
        self,
        name: str,
        short_desc: str,
        long_help: str,
        action: Action,
    ) -> "CommandRegistry":
        """
        Register a child command under this node.

        Args:
            name: Command name, unique among its siblings
            short_desc: One-line description shown in command listings
            long_help: Full help text (empty to reuse short_desc)
            action: Zero-argument callable run when the command is invoked

        Returns:
            The new node, which accepts add_command for subcommands

        Raises:
            RegistrationError: If a sibling with this name already exists
        """
        if name in self._children:
            raise RegistrationError(name, parent=" ".join(self._path))

        node = CommandRegistry(
            Command(name=name, short_desc=short_desc, long_help=long_help, action=action),
            path=self._path + (name,),
        )
        self._children[name] = node
        return node

    def find(self, *path: str) -> "CommandRegistry | None":
        """Look up a descendant by name path, e.g. find("meta", "status")."""
        node: CommandRegistry | None = self
        for name in path:
            node = node._children.get(name)
            if node is None:
                return None
        return node

    def mount(self, app: typer.Typer) -> None:
        """Attach every child of this node to ``app``, recursing into groups."""
        for node in self.commands:
            command = node.command
            runner = _wrap_action(node.path, command.action)

            if node.commands:
                group = typer.Typer(
                    callback=runner,
                    invoke_without_command=True,
                    help=command.help,
                    rich_markup_mode="rich",
                )
                node.mount(group)
                app.add_typer(group, name=command.name, short_help=command.short_desc)
            else:
                app.command(
                    name=command.name,
                    help=command.help,
                    short_help=command.short_desc,
                )(runner)


def _wrap_action(path: tuple[str, ...], action: Action) -> Action:
    """Run ``action``; an ApplicationError is reported on stderr and exits 1."""
    command_name = " ".join(path)

    def run() -> None:
        try:
            action()
        except ApplicationError as e:
            log_with_source(
                logger,
                "cli",
                "debug",
                "Command failed",
                command=command_name,
                code=e.code,
                error=e.message,
            )
            Console(stderr=True).print(f"[red]Error: {escape(e.message)}[/red]", highlight=False)
            raise typer.Exit(1) from e

    run.__name__ = command_name.replace(" ", "_") or "root"
    return run
