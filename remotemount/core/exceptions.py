# remotemount/core/exceptions.py


class RemoteMountError(Exception):
    """Base class for all errors raised by remotemount."""


class HostsFileError(RemoteMountError):
    """Raised when the hosts file cannot be read at all."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot read hosts file {path}: {detail}")


class MountListingError(RemoteMountError):
    """Raised when the list of current mounts cannot be obtained."""


class OrchestrationError(RemoteMountError):
    """An internal invariant of the mount orchestration was violated."""


class InvalidTransitionError(OrchestrationError):
    """Raised when a target status transition is not allowed."""

    def __init__(self, local_name: str, from_status: str, to_status: str):
        self.local_name = local_name
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid state transition for {local_name}: "
            f"Cannot move from '{from_status}' to '{to_status}'."
        )


class UnknownRowError(OrchestrationError):
    """Raised when a row does not belong to any known target."""

    def __init__(self, row: object, total_rows: int):
        self.row = row
        self.total_rows = total_rows
        super().__init__(f"Row {row!r} is outside the target set (0..{total_rows - 1})")


class UnresolvedTargetError(OrchestrationError):
    """Raised when the run ends with targets still Unknown or Pending."""

    def __init__(self, local_names: list[str]):
        self.local_names = local_names
        super().__init__(
            f"{len(local_names)} target(s) never reached a final status: "
            f"{', '.join(local_names)}"
        )


class ChannelClosedError(OrchestrationError):
    """Raised when sending on a used sender or registering on a closed channel."""


class RenderOrderError(OrchestrationError):
    """Raised when the view is painted or updated out of order."""
