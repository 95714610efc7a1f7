"""Abstract Base Mounter - interface for the external mount operation."""

from abc import ABC, abstractmethod
from pathlib import Path

from remotemount.models import MountAttempt


class BaseMounter(ABC):
    """Abstract base class for mount implementations."""

    @abstractmethod
    async def attempt_mount(self, remote_spec: str, target_path: Path) -> MountAttempt:
        """Mount `remote_spec` on `target_path`. May take as long as it needs."""
        pass

    @abstractmethod
    def get_mounter_name(self) -> str:
        """Get mounter name for logging."""
        pass
