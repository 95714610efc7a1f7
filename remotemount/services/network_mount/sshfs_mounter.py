"""sshfs Mounter - runs one sshfs process per mount attempt."""

import asyncio
import logging
from pathlib import Path
from typing import List, Sequence

from remotemount.models import MountAttempt

from .base_mounter import BaseMounter

DEFAULT_SSHFS_OPTIONS = ("ServerAliveCountMax=3", "ServerAliveInterval=10")


class SshfsMounter(BaseMounter):
    """
    Mounts a remote spec with sshfs.

    Keep-alive behaviour lives in the sshfs options, not here: there is no
    timeout, a hanging sshfs keeps its attempt pending.
    """

    def __init__(
        self,
        command: str = "sshfs",
        options: Sequence[str] = DEFAULT_SSHFS_OPTIONS,
    ):
        self._command = command
        self._options = list(options)

    def build_command(self, remote_spec: str, target_path: Path) -> List[str]:
        cmd = [self._command]
        for option in self._options:
            cmd.extend(["-o", option])
        cmd.extend([remote_spec, str(target_path)])
        return cmd

    async def attempt_mount(self, remote_spec: str, target_path: Path) -> MountAttempt:
        cmd = self.build_command(remote_spec, target_path)
        logging.info(f"Attempting mount: {remote_spec} -> {target_path}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
            _, stderr = await process.communicate()
        except OSError as e:
            logging.error(f"Could not start {self._command} for {remote_spec}: {e}")
            return MountAttempt(success=False, diagnostics=str(e))

        if process.returncode == 0:
            logging.info(f"Successfully mounted {remote_spec} on {target_path}")
            return MountAttempt(success=True)

        error_msg = stderr.decode("utf-8", "replace").strip() if stderr else ""
        if not error_msg:
            error_msg = f"{self._command} exited with status {process.returncode}"
        logging.error(f"Mount failed for {remote_spec}: {error_msg}")
        return MountAttempt(success=False, diagnostics=error_msg)

    def get_mounter_name(self) -> str:
        return self._command
