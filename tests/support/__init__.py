"""Test doubles and helpers for ctrlplane tests.

This package provides in-memory stand-ins for the process collaborators
so supervisor behavior can be tested without launching real servers.
"""

from .fakes import (
    FakeAddressManager,
    FakeDataDirManager,
    FakeSession,
    FakeStarter,
    RecordingProcess,
)
from .scripts import FAKE_ETCD_SCRIPT, write_executable

__all__ = [
    "FAKE_ETCD_SCRIPT",
    "FakeAddressManager",
    "FakeDataDirManager",
    "FakeSession",
    "FakeStarter",
    "RecordingProcess",
    "write_executable",
]
