from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MountStatus(str, Enum):
    """
    Status of one mount target during a run.

    Immediate:    Unknown -> Okay | Warned
    Asynchronous: Unknown -> Pending -> Okay | Failed
    """

    UNKNOWN = "Unknown"  # Nothing decided yet
    PENDING = "Pending"  # Mount attempt launched, no result yet
    WARNED = "Warned"  # Already mounted, but from another source
    FAILED = "Failed"  # Mount attempt returned an error
    OKAY = "Okay"  # Mounted with the expected source

    @property
    def is_terminal(self) -> bool:
        return self in (MountStatus.OKAY, MountStatus.WARNED, MountStatus.FAILED)


class Target(BaseModel):
    """
    One declared mount: a local name under the base directory and the remote
    spec handed verbatim to the mount command.

    `row` is the position in the hosts file. It keys asynchronous updates
    and is also the terminal line the target owns.
    """

    model_config = ConfigDict(validate_assignment=True)

    local_name: str = Field(..., min_length=1, description="Leaf name of the mount point")
    remote_spec: str = Field(..., description="Remote source, e.g. host:/path")
    row: int = Field(..., ge=0, frozen=True, description="Stable zero-based row")
    status: MountStatus = Field(default=MountStatus.UNKNOWN)
    reason: Optional[str] = Field(
        default=None, description="Diagnostic text for Warned / Failed"
    )


class CompletionMessage(BaseModel):
    """One-shot result sent by a mount task to the aggregator."""

    model_config = ConfigDict(frozen=True)

    row: int
    status: MountStatus
    reason: Optional[str] = None


class MountAttempt(BaseModel):
    """Outcome of a single external mount operation."""

    model_config = ConfigDict(frozen=True)

    success: bool
    diagnostics: str = ""
