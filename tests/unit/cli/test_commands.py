"""Unit tests for the CLI surface."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from metactl import __version__
from metactl.backend.core.exceptions import RPCError
from metactl.cli.client import RemoteClientProvider
from metactl.cli.main import app, build_app
from metactl.cli.registry import CommandRegistry
from tests.unit.conftest import TEST_ENDPOINT

runner = CliRunner()


class TestMetaCommands:
    """Tests for `metactl meta ...` with a stubbed server."""

    def test_meta_alone_exits_zero(self, provider: RemoteClientProvider, mock_meta_client: MagicMock) -> None:
        result = runner.invoke(build_app(provider), ["meta"])

        assert result.exit_code == 0
        mock_meta_client.status.assert_not_called()
        mock_meta_client.config.assert_not_called()

    def test_meta_status(self, provider: RemoteClientProvider) -> None:
        result = runner.invoke(build_app(provider), ["meta", "status"])

        assert result.exit_code == 0
        assert result.stdout == "OK\n"

    def test_meta_status_rpc_error_exits_one(
        self,
        provider: RemoteClientProvider,
        mock_meta_client: MagicMock,
    ) -> None:
        mock_meta_client.status.side_effect = RPCError("Meta.Status: ConnectError: Connection refused")

        result = runner.invoke(build_app(provider), ["meta", "status"])

        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_meta_config(self, provider: RemoteClientProvider) -> None:
        result = runner.invoke(build_app(provider), ["meta", "config"])

        assert result.exit_code == 0
        assert f"# {TEST_ENDPOINT}" in result.output
        assert '"app_url": "https://example.com/"' in result.stdout

    def test_meta_config_rpc_error_exits_one(
        self,
        provider: RemoteClientProvider,
        mock_meta_client: MagicMock,
    ) -> None:
        mock_meta_client.config.side_effect = RPCError("Meta.Config: unavailable (HTTP 503)", status_code=503)

        result = runner.invoke(build_app(provider), ["meta", "config"])

        assert result.exit_code == 1
        assert "unavailable" in result.output

    def test_endpoint_option_reaches_provider(self, mock_meta_client: MagicMock) -> None:
        provider = RemoteClientProvider(client=mock_meta_client)

        result = runner.invoke(
            build_app(provider),
            ["--endpoint", "https://meta.example.com", "--timeout", "2", "meta", "status"],
        )

        assert result.exit_code == 0
        assert provider.ctx.endpoint == "https://meta.example.com"
        assert provider.ctx.timeout == 2.0

    def test_invalid_environment_override_exits_one(
        self,
        provider: RemoteClientProvider,
        mock_meta_client: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("METACTL_TIMEOUT", "abc")

        result = runner.invoke(build_app(provider), ["meta", "status"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValidationError)
        assert "METACTL_" in result.output
        mock_meta_client.status.assert_not_called()

    def test_app_can_be_invoked_repeatedly(self, mock_meta_client: MagicMock) -> None:
        provider = RemoteClientProvider(endpoint_url=TEST_ENDPOINT, client=mock_meta_client)
        cli = build_app(provider)

        first = runner.invoke(cli, ["--endpoint", "https://meta.example.com", "meta", "status"])
        second = runner.invoke(cli, ["meta", "status"])

        assert first.exit_code == 0
        assert second.exit_code == 0
        endpoints = [call.args[0].endpoint for call in mock_meta_client.status.call_args_list]
        assert endpoints == ["https://meta.example.com", TEST_ENDPOINT]

    def test_meta_status_help(self) -> None:
        result = runner.invoke(app, ["meta", "status", "--help"])
        assert result.exit_code == 0
        assert "displays server status" in result.stdout

    def test_meta_config_help(self) -> None:
        result = runner.invoke(app, ["meta", "config", "--help"])
        assert result.exit_code == 0
        assert "displays server config" in result.stdout


class TestMainApp:
    """Tests for main app options."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "meta" in result.stdout
        assert "server" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(build_app(), ["version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == __version__

    def test_verbose_flag(self) -> None:
        result = runner.invoke(build_app(), ["-v", "version"])
        assert result.exit_code == 0

    def test_debug_flag(self) -> None:
        result = runner.invoke(build_app(), ["--debug", "version"])
        assert result.exit_code == 0
        assert "Debug mode enabled" in result.output

    def test_duplicate_command_aborts_startup(self) -> None:
        def duplicate_tree(provider: RemoteClientProvider) -> CommandRegistry:
            registry = CommandRegistry()
            registry.add_command("meta", "", "", lambda: None)
            registry.add_command("meta", "", "", lambda: None)
            return registry

        with pytest.raises(SystemExit) as exc_info:
            build_app(registry_builder=duplicate_tree)

        assert "'meta'" in str(exc_info.value.code)


class TestServerCommands:
    """Tests for `metactl server start`."""

    def test_start_runs_uvicorn(self) -> None:
        with patch("metactl.cli.commands.server.subprocess.run") as run:
            result = runner.invoke(build_app(), ["server", "start", "--port", "3999"])

        assert result.exit_code == 0
        cmd = run.call_args.args[0]
        assert "metactl.backend.main:app" in cmd
        assert cmd[cmd.index("--port") + 1] == "3999"
        assert cmd[cmd.index("--host") + 1] == "127.0.0.1"

    def test_start_reload_flag(self) -> None:
        with patch("metactl.cli.commands.server.subprocess.run") as run:
            result = runner.invoke(build_app(), ["server", "start", "--reload"])

        assert result.exit_code == 0
        assert "--reload" in run.call_args.args[0]
