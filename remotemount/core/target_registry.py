"""
Target Registry - the ordered set of mount targets and the only place their
status is allowed to change.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from remotemount.core.exceptions import (
    InvalidTransitionError,
    UnknownRowError,
    UnresolvedTargetError,
)
from remotemount.models import MountStatus, Target


class TargetRegistry:
    """
    Central gatekeeper for every target status change.

    This is the ONLY class that may:
    1. Validate a status transition.
    2. Change a Target's .status and .reason fields.

    The dispatcher mutates it before any mount task exists, and afterwards
    only the aggregator does, from the event loop thread. No lock is needed.
    """

    # Statuses that carry diagnostic text
    _REASON_STATUSES = {MountStatus.WARNED, MountStatus.FAILED}

    def __init__(self, targets: Sequence[Target]):
        for position, target in enumerate(targets):
            if target.row != position:
                raise ValueError(
                    f"Target {target.local_name} has row {target.row}, expected {position}"
                )
        self._targets: List[Target] = list(targets)

        # Every legal transition in the system
        self._transitions: Dict[MountStatus, Set[MountStatus]] = {
            MountStatus.UNKNOWN: {
                MountStatus.OKAY,
                MountStatus.WARNED,
                MountStatus.PENDING,
            },
            MountStatus.PENDING: {
                MountStatus.OKAY,
                MountStatus.FAILED,
            },
        }
        logging.debug(f"TargetRegistry initialized with {len(self._targets)} target(s)")

    @classmethod
    def from_entries(cls, entries: Sequence[Tuple[str, str]]) -> "TargetRegistry":
        """Build a registry from (local_name, remote_spec) pairs, rows in list order."""
        return cls(
            [
                Target(local_name=local_name, remote_spec=remote_spec, row=row)
                for row, (local_name, remote_spec) in enumerate(entries)
            ]
        )

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets)

    def get(self, row: int) -> Target:
        """Look up a target by row. An unknown row is an orchestration bug."""
        if isinstance(row, bool) or not isinstance(row, int):
            raise UnknownRowError(row, len(self._targets))
        if row < 0 or row >= len(self._targets):
            raise UnknownRowError(row, len(self._targets))
        return self._targets[row]

    def transition(
        self,
        *,  # Force all parameters to be keyword-only
        row: int,
        new_status: MountStatus,
        reason: Optional[str] = None,
    ) -> Target:
        """
        Move the target at `row` to `new_status`.

        Usage:
            registry.transition(row=3, new_status=MountStatus.FAILED, reason=stderr)

        Returns:
            The updated Target.

        Raises:
            UnknownRowError: If no target owns the row.
            InvalidTransitionError: If the move is not in the transition table,
                including a second result for an already resolved row.
        """
        target = self.get(row)
        old_status = target.status

        allowed_transitions = self._transitions.get(old_status, set())
        if new_status not in allowed_transitions:
            raise InvalidTransitionError(
                target.local_name, old_status.value, new_status.value
            )

        logging.debug(
            f"Transition: {target.local_name} | {old_status.value} -> {new_status.value}"
        )
        target.status = new_status
        target.reason = reason if new_status in self._REASON_STATUSES else None
        return target

    def unresolved(self) -> List[Target]:
        """Targets that have not reached Okay, Warned or Failed."""
        return [t for t in self._targets if not t.status.is_terminal]

    def ensure_all_resolved(self) -> None:
        unresolved = self.unresolved()
        if unresolved:
            raise UnresolvedTargetError([t.local_name for t in unresolved])

    def count_by_status(self) -> Dict[MountStatus, int]:
        counts = {status: 0 for status in MountStatus}
        for target in self._targets:
            counts[target.status] += 1
        return counts
