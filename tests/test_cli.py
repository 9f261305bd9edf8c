"""Tests for the cita-env CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from citaenv import __version__
from citaenv.cli import cli
from citaenv.config import Settings
from citaenv.context import ExecutionContext
from citaenv.errors import ContainerError
from citaenv.modes import Attached, Daemon, Shell


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    """A build checkout."""
    (tmp_path / "CODE_OF_CONDUCT.md").write_text("")
    return tmp_path


@pytest.fixture
def mocked_env():
    """Docker up, fixed user, default settings; yields the launch mock."""
    with patch("citaenv.cli.docker.check_docker_status", return_value=True), patch(
        "citaenv.cli.load_settings", return_value=Settings()
    ), patch("citaenv.run_config.resolve_user_id", return_value=1000), patch(
        "citaenv.cli.launch", return_value=0
    ) as mock_launch:
        yield mock_launch


class TestCli:
    """Tests for the cita-env command."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--source-dir" in result.output

    def test_docker_not_running(self, runner: CliRunner, checkout: Path) -> None:
        with patch("citaenv.cli.docker.check_docker_status", return_value=False), patch(
            "citaenv.cli.launch"
        ) as mock_launch:
            result = runner.invoke(cli, ["-C", str(checkout), "make"])
        assert result.exit_code == 1
        assert "Docker is not running" in result.output
        mock_launch.assert_not_called()

    def test_no_args_opens_shell(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        result = runner.invoke(cli, ["-C", str(checkout)])
        assert result.exit_code == 0
        config, invocation = mocked_env.call_args.args
        assert config.context is ExecutionContext.BUILD
        assert invocation.mode == Shell()

    def test_forwards_options_verbatim(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        result = runner.invoke(cli, ["-C", str(checkout), "cargo", "test", "--all", "-d"])
        assert result.exit_code == 0
        _, invocation = mocked_env.call_args.args
        assert invocation.mode == Attached(("cargo", "test", "--all", "-d"))

    def test_daemon(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        runner.invoke(cli, ["-C", str(checkout), "bin/cita", "node0", "daemon", "bebop"])
        _, invocation = mocked_env.call_args.args
        assert invocation.mode == Daemon(("bin/cita", "node0", "bebop"))

    def test_port(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        runner.invoke(cli, ["-C", str(checkout), "bin/cita", "node0", "port", "8080:80"])
        _, invocation = mocked_env.call_args.args
        assert invocation.ports == ("8080:80",)

    def test_exit_code_propagates(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        mocked_env.return_value = 3
        result = runner.invoke(cli, ["-C", str(checkout), "false"])
        assert result.exit_code == 3

    def test_run_checkout_from_env_var(self, runner: CliRunner, tmp_path: Path, mocked_env) -> None:
        release = tmp_path / "release"
        release.mkdir()
        result = runner.invoke(cli, ["make"], env={"CITA_ENV_SOURCE_DIR": str(release)})
        assert result.exit_code == 0
        config, _ = mocked_env.call_args.args
        assert config.context is ExecutionContext.RUN
        assert config.container_name == "cita_run_container"
        assert config.source_dir == tmp_path.resolve()

    def test_invalid_port_reported(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        result = runner.invoke(cli, ["-C", str(checkout), "a", "b", "port", "nope"])
        assert result.exit_code == 1
        assert "Invalid port binding" in result.output
        mocked_env.assert_not_called()

    def test_launch_error_reported(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        mocked_env.side_effect = ContainerError("Failed to start container")
        result = runner.invoke(cli, ["-C", str(checkout), "make"])
        assert result.exit_code == 1
        assert "Failed to start container" in result.output

    def test_interrupt_exits_130(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        mocked_env.side_effect = KeyboardInterrupt
        result = runner.invoke(cli, ["-C", str(checkout), "make"])
        assert result.exit_code == 130

    def test_debug_flag(self, runner: CliRunner, checkout: Path, mocked_env) -> None:
        with patch("citaenv.cli.set_debug") as mock_set_debug:
            runner.invoke(cli, ["--debug", "-C", str(checkout), "make"])
        mock_set_debug.assert_called_once_with(True)
