"""
Tests for MountDispatcher - snapshot decisions and asynchronous launches.
"""

import asyncio
from pathlib import Path

import pytest

from remotemount.core.completion_channel import CompletionChannel
from remotemount.core.target_registry import TargetRegistry
from remotemount.models import MountAttempt, MountStatus
from remotemount.services.mount_dispatcher import MountDispatcher
from remotemount.services.mount_snapshot import MountSnapshot

BASE = Path("/base")


async def collect(channel: CompletionChannel):
    return await asyncio.wait_for(_collect(channel), timeout=1)


async def _collect(channel):
    return [message async for message in channel]


@pytest.fixture
def registry() -> TargetRegistry:
    return TargetRegistry.from_entries([("a", "hostA:/data")])


class TestImmediateDecisions:
    @pytest.mark.asyncio
    async def test_matching_mount_is_okay_without_work(self, registry, fake_mounter):
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()
        snapshot = MountSnapshot({BASE / "a": "hostA:/data"})

        task = dispatcher.decide(registry.get(0), BASE, snapshot, channel)
        channel.close()

        assert task is None
        assert registry.get(0).status == MountStatus.OKAY
        assert dispatcher.launched == 0
        assert await collect(channel) == []
        assert fake_mounter.calls == []

    @pytest.mark.asyncio
    async def test_other_source_is_warned_without_work(self, registry, fake_mounter):
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()
        snapshot = MountSnapshot({BASE / "a": "hostX:/other"})

        task = dispatcher.decide(registry.get(0), BASE, snapshot, channel)
        channel.close()

        target = registry.get(0)
        assert task is None
        assert target.status == MountStatus.WARNED
        assert "hostX:/other" in target.reason
        assert await collect(channel) == []
        assert fake_mounter.calls == []

    @pytest.mark.asyncio
    async def test_mount_elsewhere_does_not_count(self, registry, fake_mounter):
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()
        snapshot = MountSnapshot({Path("/elsewhere/a"): "hostA:/data"})

        dispatcher.decide(registry.get(0), BASE, snapshot, channel)

        assert registry.get(0).status == MountStatus.PENDING
        assert dispatcher.launched == 1
        channel.close()
        await collect(channel)


class TestAsynchronousLaunch:
    @pytest.mark.asyncio
    async def test_unmounted_target_goes_pending_and_reports_okay(self, registry, fake_mounter):
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()

        task = dispatcher.decide(registry.get(0), BASE, MountSnapshot({}), channel)
        channel.close()

        assert task is not None
        assert registry.get(0).status == MountStatus.PENDING
        # decide() never awaits, so the attempt has not started yet
        assert fake_mounter.calls == []

        messages = await collect(channel)
        assert fake_mounter.calls == [("hostA:/data", BASE / "a")]
        assert [(m.row, m.status) for m in messages] == [(0, MountStatus.OKAY)]
        assert dispatcher.launched == 1

    @pytest.mark.asyncio
    async def test_failed_attempt_reports_diagnostics(self, registry, fake_mounter):
        fake_mounter.results["hostA:/data"] = MountAttempt(
            success=False, diagnostics="remote host has disconnected"
        )
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()

        dispatcher.decide(registry.get(0), BASE, MountSnapshot({}), channel)
        channel.close()

        [message] = await collect(channel)
        assert message.status == MountStatus.FAILED
        assert message.reason == "remote host has disconnected"
        # The aggregator applies results, not the dispatcher
        assert registry.get(0).status == MountStatus.PENDING

    @pytest.mark.asyncio
    async def test_os_error_from_mounter_is_a_failure(self, registry, fake_mounter):
        fake_mounter.results["hostA:/data"] = PermissionError("fusermount: permission denied")
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()

        dispatcher.decide(registry.get(0), BASE, MountSnapshot({}), channel)
        channel.close()

        [message] = await collect(channel)
        assert message.status == MountStatus.FAILED
        assert "permission denied" in message.reason

    @pytest.mark.asyncio
    async def test_crashing_attempt_still_releases_the_channel(
        self, registry, fake_mounter, caplog
    ):
        fake_mounter.results["hostA:/data"] = RuntimeError("bug in mounter")
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()

        task = dispatcher.decide(registry.get(0), BASE, MountSnapshot({}), channel)
        channel.close()

        assert await collect(channel) == []
        result = await asyncio.gather(task, return_exceptions=True)
        assert isinstance(result[0], RuntimeError)
        assert registry.get(0).status == MountStatus.PENDING
        assert "/base/a crashed without reporting" in caplog.text
        assert "bug in mounter" in caplog.text

    @pytest.mark.asyncio
    async def test_one_attempt_per_unmounted_target(self, fake_mounter):
        registry = TargetRegistry.from_entries(
            [("a", "hostA:/"), ("b", "hostB:/"), ("c", "hostC:/")]
        )
        snapshot = MountSnapshot({BASE / "b": "hostB:/"})
        dispatcher = MountDispatcher(registry, fake_mounter)
        channel = CompletionChannel()

        for target in registry:
            dispatcher.decide(target, BASE, snapshot, channel)
        channel.close()

        messages = await collect(channel)
        assert dispatcher.launched == 2
        assert sorted(m.row for m in messages) == [0, 2]
        assert sorted(remote for remote, _ in fake_mounter.calls) == ["hostA:/", "hostC:/"]

        # Let the done callbacks run
        for _ in range(3):
            await asyncio.sleep(0)
        assert dispatcher.tasks == set()
