"""
Mount Dispatcher - decides, per target, whether a mount attempt is needed.

The decision itself is synchronous. When a mount is needed the attempt runs
as its own asyncio task and reports through the completion channel.
"""

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Optional, Set

from remotemount.core.completion_channel import CompletionChannel, CompletionSender
from remotemount.core.target_registry import TargetRegistry
from remotemount.models import CompletionMessage, MountStatus, Target

from .network_mount import BaseMounter


class MountDispatcher:
    def __init__(self, registry: TargetRegistry, mounter: BaseMounter):
        self._registry = registry
        self._mounter = mounter
        self._tasks: Set[asyncio.Task] = set()
        self._launched = 0

    @property
    def launched(self) -> int:
        """Number of asynchronous mount attempts started."""
        return self._launched

    @property
    def tasks(self) -> Set[asyncio.Task]:
        """Mount tasks that have not finished yet."""
        return set(self._tasks)

    def decide(
        self,
        target: Target,
        base_dir: Path,
        snapshot: Mapping[Path, str],
        completion_sink: CompletionChannel,
    ) -> Optional[asyncio.Task]:
        """
        Resolve `target` from the snapshot or launch a mount attempt for it.

        Must be called from inside the running event loop. Never awaits, so
        no mount task can report before the caller has painted this row.

        Returns:
            The launched task, or None when the snapshot settled the target.
        """
        mount_path = base_dir / target.local_name
        mounted_source = snapshot.get(mount_path)

        if mounted_source is not None:
            if mounted_source == target.remote_spec:
                self._registry.transition(row=target.row, new_status=MountStatus.OKAY)
            else:
                logging.warning(
                    f"{mount_path} is mounted from {mounted_source}, expected {target.remote_spec}"
                )
                self._registry.transition(
                    row=target.row,
                    new_status=MountStatus.WARNED,
                    reason=f'already mounted, but wrong source? "{mounted_source}"',
                )
            return None

        self._registry.transition(row=target.row, new_status=MountStatus.PENDING)
        # Register the producer before the task exists so the channel cannot
        # run dry while the task is still waiting to be scheduled.
        sender = completion_sink.sender()
        task = asyncio.create_task(
            self._mount_and_report(target.row, target.remote_spec, mount_path, sender),
            name=f"mount-{target.local_name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._launched += 1
        return task

    async def _mount_and_report(
        self, row: int, remote_spec: str, mount_path: Path, sender: CompletionSender
    ) -> None:
        try:
            try:
                attempt = await self._mounter.attempt_mount(remote_spec, mount_path)
            except OSError as e:
                logging.error(f"Mount attempt for {mount_path} raised: {e}")
                sender.send(
                    CompletionMessage(row=row, status=MountStatus.FAILED, reason=str(e))
                )
                return

            if attempt.success:
                sender.send(CompletionMessage(row=row, status=MountStatus.OKAY))
            else:
                sender.send(
                    CompletionMessage(
                        row=row, status=MountStatus.FAILED, reason=attempt.diagnostics
                    )
                )
        except Exception:
            logging.exception(f"Mount attempt for {mount_path} crashed without reporting")
            raise
        finally:
            sender.close()
