"""Shared test fixtures for ctrlplane tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from support import FakeAddressManager, FakeDataDirManager, FakeStarter

from ctrlplane.process import ProcessConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ctrlplane environment variables from leaking into tests."""
    for name in ("CTRLPLANE_DEBUG", "CTRLPLANE_LOG_LEVEL", "CTRLPLANE_ASSETS_DIR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def address_manager() -> FakeAddressManager:
    """Address manager that always allocates 127.0.0.1:2379."""
    return FakeAddressManager()


@pytest.fixture
def data_dir_manager(tmp_path: Path) -> FakeDataDirManager:
    """Data directory manager backed by a real directory under tmp_path."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return FakeDataDirManager(data_dir)


MakeConfig = Callable[..., ProcessConfig]


@pytest.fixture
def make_config(
    address_manager: FakeAddressManager,
    data_dir_manager: FakeDataDirManager,
) -> MakeConfig:
    """Return a factory for ProcessConfig wired to the fake collaborators.

    Keyword arguments override the defaults. ``starter`` is required.
    """

    def _make(starter: FakeStarter, **overrides: object) -> ProcessConfig:
        values: dict[str, object] = {
            "path": Path("/opt/bin/etcd"),
            "address_manager": address_manager,
            "session_starter": starter,
            "data_dir_manager": data_dir_manager,
            "start_timeout": 1.0,
            "stop_timeout": 1.0,
        }
        values.update(overrides)
        return ProcessConfig(**values)  # pyright: ignore[reportArgumentType]

    return _make
