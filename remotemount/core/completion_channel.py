"""
Completion channel - many producers, one consumer, unbounded.

Each mount task gets its own CompletionSender and reports exactly once. The
consumer iterates the channel until it has been closed for new producers and
every registered sender has been released.
"""

import asyncio
import logging
from typing import AsyncIterator, Optional, Union

from remotemount.core.exceptions import ChannelClosedError
from remotemount.models import CompletionMessage


class _Exhausted:
    """Marker queued once the last producer is gone."""


_EXHAUSTED = _Exhausted()


class CompletionSender:
    """Send side handed to one mount task. Usable for a single message."""

    def __init__(self, channel: "CompletionChannel"):
        self._channel = channel
        self._released = False

    @property
    def is_released(self) -> bool:
        return self._released

    def send(self, message: CompletionMessage) -> None:
        if self._released:
            raise ChannelClosedError(
                f"Sender already used or closed, dropping message for row {message.row}"
            )
        self._released = True
        self._channel._deliver(message)

    def close(self) -> None:
        """Release the sender without a message. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        self._channel._deliver(None)


class CompletionChannel:
    def __init__(self) -> None:
        self._queue: asyncio.Queue[Union[CompletionMessage, _Exhausted]] = asyncio.Queue()
        self._open_senders = 0
        self._closed = False
        self._exhausted_queued = False
        self._received = 0

    @property
    def open_senders(self) -> int:
        return self._open_senders

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def received(self) -> int:
        """Number of messages handed to the consumer so far."""
        return self._received

    def sender(self) -> CompletionSender:
        """Register a new producer."""
        if self._closed:
            raise ChannelClosedError("Channel is closed for new producers")
        self._open_senders += 1
        return CompletionSender(self)

    def close(self) -> None:
        """No more producers will be registered after this call."""
        if self._closed:
            return
        self._closed = True
        logging.debug(f"Completion channel closed with {self._open_senders} open sender(s)")
        self._maybe_exhaust()

    def _deliver(self, message: Optional[CompletionMessage]) -> None:
        if message is not None:
            self._queue.put_nowait(message)
        self._open_senders -= 1
        self._maybe_exhaust()

    def _maybe_exhaust(self) -> None:
        if self._closed and self._open_senders == 0 and not self._exhausted_queued:
            self._exhausted_queued = True
            self._queue.put_nowait(_EXHAUSTED)

    async def __aiter__(self) -> AsyncIterator[CompletionMessage]:
        while True:
            item = await self._queue.get()
            if isinstance(item, _Exhausted):
                return
            self._received += 1
            yield item
