"""
Mount Snapshot - point-in-time view of what is mounted where.

Built once from the output of mount(8) before any target is dispatched, then
only read. Lines look like `<source> on <mount point> <anything else>`.
"""

import asyncio
import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Sequence

from remotemount.core.exceptions import MountListingError

MOUNT_LINE_PATTERN = re.compile(r"^([^ ]+) on ([^ ]+) ")


class MountSnapshot(Mapping[Path, str]):
    """Immutable mapping from absolute mount point to mounted source."""

    def __init__(self, mounts: Mapping[Path, str]):
        self._mounts = MappingProxyType(dict(mounts))

    @classmethod
    def from_mount_output(cls, text: str) -> "MountSnapshot":
        mounts: Dict[Path, str] = {}
        for line in text.split("\n"):
            match = MOUNT_LINE_PATTERN.match(line)
            if not match:
                continue
            # A later mount on the same point shadows the earlier one, so the
            # last line wins.
            mounts[Path(match.group(2))] = match.group(1)
        return cls(mounts)

    def __getitem__(self, mount_point: Path) -> str:
        return self._mounts[mount_point]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._mounts)

    def __len__(self) -> int:
        return len(self._mounts)

    def __repr__(self) -> str:
        return f"MountSnapshot({dict(self._mounts)!r})"


async def read_mount_snapshot(command: Sequence[str] = ("mount",)) -> MountSnapshot:
    """
    Run the mount listing command and parse its output.

    Raises:
        MountListingError: If the command cannot be started or does not exit
            successfully. Without a snapshot we could double-mount.
    """
    if not command:
        raise MountListingError("No mount listing command configured")

    try:
        process = await asyncio.create_subprocess_exec(
            *command, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
        )
        stdout, stderr = await process.communicate()
    except OSError as e:
        raise MountListingError(f"Could not run {command[0]}: {e}") from e

    if process.returncode != 0:
        error_text = stderr.decode("utf-8", "replace").strip() if stderr else ""
        if error_text:
            logging.error(f"{command[0]}: {error_text}")
        if process.returncode < 0:
            raise MountListingError(
                f"{command[0]} was killed by signal {-process.returncode}, we can't do our job."
            )
        raise MountListingError(
            f"{command[0]} exited with status {process.returncode}, we can't do our job."
        )

    snapshot = MountSnapshot.from_mount_output(stdout.decode("utf-8", "replace"))
    logging.debug(f"Mount snapshot holds {len(snapshot)} mount point(s)")
    return snapshot
