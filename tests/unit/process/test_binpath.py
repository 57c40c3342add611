"""Tests for ctrlplane.process._binpath module."""

from pathlib import Path

import pytest

from ctrlplane.process import asset_env_var, default_bin_path_finder


class TestAssetEnvVar:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("etcd", "TEST_ASSET_ETCD"),
            ("kube-apiserver", "TEST_ASSET_KUBE_APISERVER"),
            ("kube.ctl", "TEST_ASSET_KUBE_CTL"),
            ("3rd-party", "TEST_ASSET_RD_PARTY"),
        ],
    )
    def test_sanitizes_name(self, name: str, expected: str) -> None:
        assert asset_env_var(name) == expected


class TestDefaultBinPathFinder:
    def test_env_override_wins(self, tmp_path: Path) -> None:
        env = {"TEST_ASSET_ETCD": "/custom/etcd", "PATH": str(tmp_path)}
        assert default_bin_path_finder("etcd", env) == Path("/custom/etcd")

    def test_found_on_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        binary = tmp_path / "etcd"
        _ = binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)
        monkeypatch.setenv("PATH", str(tmp_path))

        assert default_bin_path_finder("etcd", {}) == binary

    def test_falls_back_to_assets_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        env = {"CTRLPLANE_ASSETS_DIR": "/opt/assets"}

        assert default_bin_path_finder("etcd", env) == Path("/opt/assets/etcd")

    def test_default_assets_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))

        assert default_bin_path_finder("kube-apiserver", {}) == Path(
            "assets/bin/kube-apiserver"
        )

    def test_empty_override_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        env = {"TEST_ASSET_ETCD": ""}

        assert default_bin_path_finder("etcd", env) == Path("assets/bin/etcd")

    def test_reads_os_environ_by_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_ASSET_ETCD", str(tmp_path / "etcd"))
        assert default_bin_path_finder("etcd") == tmp_path / "etcd"
