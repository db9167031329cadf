"""Frontier for the asyncio walker.

Same contract as ``fastwalklib.sync.core.frontier.Frontier``. All methods
run on the event loop thread and only ``wait_for_work`` suspends, so every
other operation is atomic with respect to the worker tasks.
"""

import asyncio
from collections import deque
from typing import Deque, Optional

from ..._common import FrontierOrder, WorkItem


class AsyncFrontier:
    """Stack or queue of WorkItems with in-flight tracking for asyncio tasks."""

    def __init__(self, order: FrontierOrder = FrontierOrder.LIFO):
        self.order = order
        self._items: Deque[WorkItem] = deque()
        self._waiters: Deque[asyncio.Future] = deque()
        self._in_flight = 0
        self._abandoned = False

    def push(self, item: WorkItem) -> None:
        """Add a work item and wake one waiting worker."""
        if self._abandoned:
            return
        self._items.append(item)
        self._wake(everyone=False)

    def try_pop(self) -> Optional[WorkItem]:
        """Remove one item without waiting; it stays in flight until task_done."""
        if not self._items:
            return None
        self._in_flight += 1
        if self.order is FrontierOrder.LIFO:
            return self._items.pop()
        return self._items.popleft()

    def task_done(self) -> None:
        """Mark one popped item as fully expanded."""
        if self._in_flight <= 0:
            raise ValueError("task_done() called more times than items were popped")
        self._in_flight -= 1
        if self.is_exhausted():
            self._wake(everyone=True)

    def is_empty(self) -> bool:
        return not self._items

    def is_exhausted(self) -> bool:
        return self._abandoned or (not self._items and self._in_flight == 0)

    async def wait_for_work(self, timeout: Optional[float] = None) -> bool:
        """Suspend until an item is queued, the frontier is exhausted, or timeout.

        Returns:
            True if an item is queued when the wait ends
        """
        if not self._items and not self.is_exhausted():
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            try:
                await asyncio.wait_for(waiter, timeout)
            except asyncio.TimeoutError:
                pass
            finally:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
        return bool(self._items) and not self._abandoned

    def abandon(self) -> None:
        """Drop every queued item and wake all waiters."""
        self._abandoned = True
        self._items.clear()
        self._wake(everyone=True)

    def _wake(self, everyone: bool) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                if not everyone:
                    return

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return (f"AsyncFrontier(order={self.order.value}, queued={len(self._items)}, "
                f"in_flight={self._in_flight})")
