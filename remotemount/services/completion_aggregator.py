"""
Completion Aggregator - the single consumer of mount results.

Results are applied by the row they carry, never by arrival order.
"""

import logging
from typing import AsyncIterable

from remotemount.core.target_registry import TargetRegistry
from remotemount.models import CompletionMessage
from remotemount.presentation.status_renderer import StatusRenderer


async def drain(
    completion_source: AsyncIterable[CompletionMessage],
    registry: TargetRegistry,
    renderer: StatusRenderer,
) -> int:
    """
    Apply every completion message until the source is exhausted.

    The renderer is finalized however the loop ends, so the cursor is parked
    below the view before anything else is printed.

    Returns:
        The number of messages applied.

    Raises:
        UnknownRowError, InvalidTransitionError: A message does not fit the
            target set. These are orchestration bugs and are not recovered.
        UnresolvedTargetError: The source ran dry while targets were pending.
    """
    applied = 0
    try:
        async for message in completion_source:
            target = registry.transition(
                row=message.row, new_status=message.status, reason=message.reason
            )
            renderer.render(target)
            applied += 1
            logging.debug(f"Applied {message.status.value} for {target.local_name}")

        registry.ensure_all_resolved()
    finally:
        renderer.finalize()

    return applied
