"""
Pytest configuration and shared fixtures.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Tuple, Union

import pytest

from remotemount.config import Settings
from remotemount.core.target_registry import TargetRegistry
from remotemount.models import MountAttempt
from remotemount.presentation.terminal_writer import CapturingTerminalWriter
from remotemount.services.network_mount import BaseMounter


class FakeMounter(BaseMounter):
    """
    Mounter whose outcome per remote spec is set up front.

    `hold(remote)` returns an Event the attempt for that remote waits on, so a
    test decides the order in which attempts complete.
    """

    def __init__(self, results: Dict[str, Union[MountAttempt, Exception]] = None):
        self.results = dict(results or {})
        self.calls: List[Tuple[str, Path]] = []
        self.completed: List[str] = []
        self._gates: Dict[str, asyncio.Event] = {}

    def hold(self, remote_spec: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[remote_spec] = gate
        return gate

    async def attempt_mount(self, remote_spec: str, target_path: Path) -> MountAttempt:
        self.calls.append((remote_spec, target_path))
        gate = self._gates.get(remote_spec)
        if gate is not None:
            await gate.wait()
        self.completed.append(remote_spec)
        result = self.results.get(remote_spec, MountAttempt(success=True))
        if isinstance(result, Exception):
            raise result
        return result

    def get_mounter_name(self) -> str:
        return "fake"


@pytest.fixture
def fake_mounter() -> FakeMounter:
    return FakeMounter()


@pytest.fixture
def writer() -> CapturingTerminalWriter:
    return CapturingTerminalWriter()


@pytest.fixture
def base_dir() -> Path:
    return Path("/base")


@pytest.fixture
def settings(base_dir: Path) -> Settings:
    return Settings(base_dir=base_dir, color=False, line_width=80)


@pytest.fixture
def two_targets() -> TargetRegistry:
    return TargetRegistry.from_entries([("a", "hostA:/data"), ("b", "hostB:/srv")])
