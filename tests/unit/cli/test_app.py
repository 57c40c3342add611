"""Tests for the ctrlplane CLI application."""

from io import StringIO
from pathlib import Path

import pytest
from cyclopts import App
from pytest_mock import MockerFixture
from rich.console import Console

from ctrlplane.cli import ExitCode, create_app
from ctrlplane.control_plane import ControlPlane
from ctrlplane.process import APIServer, Etcd


def invoke(app: App, tokens: list[str]) -> int:
    try:
        app(tokens)
    except SystemExit as e:
        return int(e.code or 0)
    return 0


@pytest.fixture
def error_output() -> StringIO:
    return StringIO()


@pytest.fixture
def app(error_output: StringIO) -> App:
    return create_app(
        Console(file=StringIO(), width=200),
        Console(file=error_output, width=200),
        exit_on_error=False,
    )


class TestRunCommand:
    def test_builds_control_plane_from_options(
        self, app: App, mocker: MockerFixture
    ) -> None:
        serve = mocker.patch(
            "ctrlplane.cli._runner.serve", return_value=ExitCode.SUCCESS
        )

        code = invoke(
            app,
            [
                "run",
                "--etcd-path",
                "/opt/etcd",
                "--apiserver-path",
                "/opt/kube-apiserver",
                "--start-timeout",
                "5",
                "--stop-timeout",
                "2",
            ],
        )

        assert code == ExitCode.SUCCESS
        serve.assert_called_once()
        target = serve.call_args.args[0]
        assert isinstance(target, ControlPlane)
        api_server = target.api_server
        assert isinstance(api_server, APIServer)
        assert api_server.config.path == Path("/opt/kube-apiserver")
        assert api_server.config.start_timeout == 5.0
        assert api_server.etcd.config.path == Path("/opt/etcd")
        assert api_server.etcd.config.stop_timeout == 2.0
        assert serve.call_args.kwargs["supervisors"] == (api_server.etcd, api_server)

    def test_start_failure_exit_code(self, app: App, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "ctrlplane.cli._runner.serve", return_value=ExitCode.START_FAILED
        )

        assert invoke(app, ["run"]) == ExitCode.START_FAILED

    def test_invalid_settings_exit_code(
        self,
        app: App,
        error_output: StringIO,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        serve = mocker.patch("ctrlplane.cli._runner.serve")
        monkeypatch.setenv("CTRLPLANE_START_TIMEOUT", "0")

        assert invoke(app, ["run"]) == ExitCode.CONFIG_ERROR
        assert "Invalid ctrlplane settings" in error_output.getvalue()
        serve.assert_not_called()


class TestEtcdCommand:
    def test_serves_standalone_etcd(self, app: App, mocker: MockerFixture) -> None:
        serve = mocker.patch(
            "ctrlplane.cli._runner.serve", return_value=ExitCode.SUCCESS
        )

        code = invoke(app, ["etcd", "--etcd-path", "/opt/etcd", "--log-level", "debug"])

        assert code == ExitCode.SUCCESS
        target = serve.call_args.args[0]
        assert isinstance(target, Etcd)
        assert target.config.path == Path("/opt/etcd")
        assert serve.call_args.args[1] == target.url

    def test_stop_failure_exit_code(self, app: App, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "ctrlplane.cli._runner.serve", return_value=ExitCode.STOP_FAILED
        )

        assert invoke(app, ["etcd"]) == ExitCode.STOP_FAILED


class TestLoggerFromSettings:
    def test_rotation_settings_reach_logger(
        self,
        app: App,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        _ = mocker.patch("ctrlplane.cli._runner.serve", return_value=ExitCode.SUCCESS)
        create_logger = mocker.patch("ctrlplane.cli._app.create_logger")
        log_file = tmp_path / "ctrlplane.log"
        monkeypatch.setenv("CTRLPLANE_LOGGING__FILE", str(log_file))
        monkeypatch.setenv("CTRLPLANE_LOGGING__MAX_BYTES", "4096")
        monkeypatch.setenv("CTRLPLANE_LOGGING__BACKUP_COUNT", "2")

        assert invoke(app, ["etcd"]) == ExitCode.SUCCESS

        create_logger.assert_called_once_with(
            level="info",
            log_format="text",
            log_file=str(log_file),
            max_bytes=4096,
            backup_count=2,
        )
