"""Frontier: the shared pool of directories waiting to be expanded."""

import threading
from collections import deque
from typing import Deque, Optional

from ..._common import FrontierOrder, WorkItem


class Frontier:
    """Thread-safe stack or queue of WorkItems with in-flight tracking.

    Besides queued items the frontier counts items that have been popped but
    not yet finished (``task_done``). A worker pushes every child of the item
    it is expanding BEFORE calling ``task_done``, and both counters live
    under one lock, so "nothing queued and nothing in flight" observed under
    that lock means no more work can ever appear.
    """

    def __init__(self, order: FrontierOrder = FrontierOrder.LIFO):
        """Initialize frontier.

        Args:
            order: LIFO (stack, depth-first leaning) or FIFO (queue)
        """
        self.order = order
        self._items: Deque[WorkItem] = deque()
        self._lock = threading.Lock()
        self._changed = threading.Condition(self._lock)
        self._in_flight = 0
        self._abandoned = False

    def push(self, item: WorkItem) -> None:
        """Add a work item and wake one idle worker.

        Pushes after ``abandon`` are dropped.
        """
        with self._changed:
            if self._abandoned:
                return
            self._items.append(item)
            self._changed.notify()

    def try_pop(self) -> Optional[WorkItem]:
        """Remove and return one item without blocking.

        A returned item counts as in flight until ``task_done`` is called.

        Returns:
            WorkItem, or None if nothing is queued
        """
        with self._lock:
            if not self._items:
                return None
            self._in_flight += 1
            if self.order is FrontierOrder.LIFO:
                return self._items.pop()
            return self._items.popleft()

    def task_done(self) -> None:
        """Mark one popped item as fully expanded.

        Wakes every waiter when this leaves the frontier exhausted, so idle
        workers can retire.
        """
        with self._changed:
            if self._in_flight <= 0:
                raise ValueError("task_done() called more times than items were popped")
            self._in_flight -= 1
            if self._in_flight == 0 and not self._items:
                self._changed.notify_all()

    def is_empty(self) -> bool:
        """True if no item is queued (items may still be in flight)."""
        with self._lock:
            return not self._items

    def is_exhausted(self) -> bool:
        """True if nothing is queued, nothing is in flight, or abandoned."""
        with self._lock:
            return self._exhausted()

    def _exhausted(self) -> bool:
        return self._abandoned or (not self._items and self._in_flight == 0)

    def wait_for_work(self, timeout: Optional[float] = None) -> bool:
        """Block until an item is queued, the frontier is exhausted, or timeout.

        Args:
            timeout: Maximum seconds to wait

        Returns:
            True if an item is queued when the wait ends
        """
        with self._changed:
            self._changed.wait_for(lambda: self._items or self._exhausted(), timeout)
            return bool(self._items) and not self._abandoned

    def abandon(self) -> None:
        """Drop every queued item and wake all waiters.

        Used on cancellation: the frontier is not drained.
        """
        with self._changed:
            self._abandoned = True
            self._items.clear()
            self._changed.notify_all()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        with self._lock:
            return (f"Frontier(order={self.order.value}, queued={len(self._items)}, "
                    f"in_flight={self._in_flight})")
