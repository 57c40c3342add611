from pathlib import Path

import pytest
from support import FAKE_ETCD_SCRIPT, write_executable


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def fake_etcd(tmp_path: Path) -> Path:
    """Executable that behaves like etcd and stops on SIGTERM."""
    return write_executable(tmp_path, "etcd", str(FAKE_ETCD_SCRIPT))


@pytest.fixture
def silent_etcd(tmp_path: Path) -> Path:
    """Executable that behaves like etcd but never reports readiness."""
    return write_executable(
        tmp_path, "etcd-silent", str(FAKE_ETCD_SCRIPT), "--mode=silent"
    )


@pytest.fixture
def stubborn_etcd(tmp_path: Path) -> Path:
    """Executable that behaves like etcd but ignores SIGTERM."""
    return write_executable(
        tmp_path, "etcd-stubborn", str(FAKE_ETCD_SCRIPT), "--mode=stubborn"
    )
