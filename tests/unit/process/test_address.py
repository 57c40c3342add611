"""Tests for ctrlplane.process._address module."""

import socket

import pytest

from ctrlplane.exceptions import AddressNotInitializedError
from ctrlplane.process import AddressManager, DefaultAddressManager


class TestDefaultAddressManager:
    def test_host_before_initialize_raises(self) -> None:
        manager = DefaultAddressManager()
        with pytest.raises(AddressNotInitializedError, match="not initialized"):
            _ = manager.host

    def test_port_before_initialize_raises(self) -> None:
        manager = DefaultAddressManager()
        with pytest.raises(AddressNotInitializedError, match="not initialized"):
            _ = manager.port

    def test_initialize_returns_loopback_and_free_port(self) -> None:
        manager = DefaultAddressManager()

        host, port = manager.initialize()

        assert host == "127.0.0.1"
        assert 0 < port < 65536
        assert manager.host == host
        assert manager.port == port

    def test_allocated_port_can_be_bound(self) -> None:
        manager = DefaultAddressManager(bind_host="127.0.0.1")
        host, port = manager.initialize()

        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((host, port))

    def test_reinitialize_allocates_again(self) -> None:
        manager = DefaultAddressManager()
        _ = manager.initialize()

        host, port = manager.initialize()

        assert (manager.host, manager.port) == (host, port)

    def test_unresolvable_host_raises_oserror(self) -> None:
        manager = DefaultAddressManager(bind_host="host.invalid")
        with pytest.raises(OSError):  # noqa: PT011
            _ = manager.initialize()

    def test_satisfies_protocol(self) -> None:
        assert isinstance(DefaultAddressManager(), AddressManager)
