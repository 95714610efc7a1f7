"""
Mount Orchestrator - runs one complete mount pass.

    hosts file -> registry -> snapshot -> dispatch + first paint -> drain

Everything up to and including the first paint is synchronous with respect
to the mount tasks: none of them gets to run before every row is on screen.
"""

import logging
from typing import Optional

from remotemount.config import Settings
from remotemount.core.completion_channel import CompletionChannel
from remotemount.core.target_registry import TargetRegistry
from remotemount.models import MountStatus
from remotemount.presentation.status_renderer import StatusRenderer
from remotemount.presentation.terminal_writer import TerminalWriter

from .completion_aggregator import drain
from .hosts_file import read_hosts
from .mount_dispatcher import MountDispatcher
from .mount_snapshot import MountSnapshot, read_mount_snapshot
from .network_mount import BaseMounter, SshfsMounter


class MountOrchestrator:
    def __init__(
        self,
        settings: Settings,
        writer: TerminalWriter,
        mounter: Optional[BaseMounter] = None,
        line_width: Optional[int] = None,
    ):
        self._settings = settings
        self._writer = writer
        self._mounter = mounter or SshfsMounter(
            command=settings.mount_command, options=settings.mount_options
        )
        self._line_width = line_width or settings.line_width
        self.launched = 0
        self.completions = 0

    async def run(self) -> TargetRegistry:
        """
        Bring every target to a final status.

        Raises:
            HostsFileError, MountListingError: Before anything is painted or
                mounted.
            OrchestrationError: On a broken internal invariant.
        """
        entries = await read_hosts(self._settings.hosts_path)
        registry = TargetRegistry.from_entries(entries)

        snapshot = await read_mount_snapshot(self._settings.mount_list_command)

        return await self.run_with(registry, snapshot)

    async def run_with(
        self, registry: TargetRegistry, snapshot: MountSnapshot
    ) -> TargetRegistry:
        """Dispatch and drain an already built registry against `snapshot`."""
        base_dir = self._settings.mount_base
        channel = CompletionChannel()
        dispatcher = MountDispatcher(registry, self._mounter)
        renderer = StatusRenderer(self._writer, len(registry), self._line_width)

        logging.info(
            f"Dispatching {len(registry)} target(s) under {base_dir} "
            f"with {self._mounter.get_mounter_name()}"
        )
        for target in registry:
            dispatcher.decide(target, base_dir, snapshot, channel)
            renderer.paint_initial(target)

        channel.close()
        self.launched = dispatcher.launched
        self.completions = await drain(channel, registry, renderer)

        counts = registry.count_by_status()
        logging.info(
            f"Done: {counts[MountStatus.OKAY]} ok, {counts[MountStatus.WARNED]} warned, "
            f"{counts[MountStatus.FAILED]} failed "
            f"({self.launched} mount attempt(s), {self.completions} completion(s))"
        )
        return registry
