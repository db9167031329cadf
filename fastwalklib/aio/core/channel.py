"""Result channel for the asyncio walker.

Same contract as ``fastwalklib.sync.core.channel.ResultChannel``: closes
exactly once, rejects entries after close, and drops its buffer unless the
walk completed. ``close`` is synchronous so that it can run from a
cancellation callback scheduled on the loop.
"""

import asyncio
from collections import deque
from typing import Deque, Optional

from ..._common import Entry, WalkOutcome
from ...sync.core.channel import ChannelClosed


class AsyncResultChannel:
    """Closeable, optionally bounded entry channel for one consumer task."""

    def __init__(self, capacity: int = 0):
        """Initialize channel.

        Args:
            capacity: Maximum buffered entries; 0 means unbounded
        """
        self.capacity = capacity
        self._buffer: Deque[Entry] = deque()
        self._getters: Deque[asyncio.Future] = deque()
        self._putters: Deque[asyncio.Future] = deque()
        self._outcome = WalkOutcome.RUNNING
        self._error: Optional[BaseException] = None

    async def put(self, entry: Entry) -> bool:
        """Publish an entry, suspending while a bounded channel is full.

        Returns:
            True if the entry was buffered, False if the channel is closed
        """
        while self._is_full() and self._outcome is WalkOutcome.RUNNING:
            await self._wait(self._putters, None)
        if self._outcome is not WalkOutcome.RUNNING:
            return False
        self._buffer.append(entry)
        self._wake(self._getters)
        return True

    async def get(self, timeout: Optional[float] = None) -> Entry:
        """Take the next entry, suspending while the channel is open and empty.

        Raises:
            ChannelClosed: If the channel is closed and has nothing left
            TimeoutError: If ``timeout`` elapsed with nothing to return
        """
        while not self._buffer and self._outcome is WalkOutcome.RUNNING:
            if not await self._wait(self._getters, timeout):
                raise TimeoutError("no entry available")
        if self._buffer:
            entry = self._buffer.popleft()
            self._wake(self._putters)
            return entry
        raise ChannelClosed(self._outcome, self._error)

    def close(self, outcome: WalkOutcome = WalkOutcome.COMPLETED,
              error: Optional[BaseException] = None) -> bool:
        """Close the channel; returns False if it was already closed."""
        if outcome is WalkOutcome.RUNNING:
            raise ValueError("cannot close a channel with outcome RUNNING")
        if self._outcome is not WalkOutcome.RUNNING:
            return False
        self._outcome = outcome
        self._error = error
        if outcome is not WalkOutcome.COMPLETED:
            self._buffer.clear()
        self._wake(self._getters)
        self._wake(self._putters)
        return True

    async def _wait(self, waiters: Deque[asyncio.Future], timeout: Optional[float]) -> bool:
        waiter = asyncio.get_running_loop().create_future()
        waiters.append(waiter)
        try:
            await asyncio.wait_for(waiter, timeout)
            return True
        except asyncio.TimeoutError:
            return False
        finally:
            if waiter in waiters:
                waiters.remove(waiter)

    @staticmethod
    def _wake(waiters: Deque[asyncio.Future]) -> None:
        while waiters:
            waiter = waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)

    def _is_full(self) -> bool:
        return self.capacity > 0 and len(self._buffer) >= self.capacity

    @property
    def closed(self) -> bool:
        return self._outcome is not WalkOutcome.RUNNING

    @property
    def outcome(self) -> WalkOutcome:
        return self._outcome

    def __len__(self) -> int:
        return len(self._buffer)
