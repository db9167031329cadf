"""Result channel and completion detector for the thread-based walker.

Workers publish Entries into a ``ResultChannel``; exactly one consumer drains
it. The ``CompletionDetector`` counts live workers and closes the channel
when the last one retires.
"""

import threading
from collections import deque
from typing import Callable, Deque, Optional

from ..._common import Entry, WalkOutcome


class ChannelClosed(Exception):
    """Raised by ``ResultChannel.get`` once no entry will ever arrive."""

    def __init__(self, outcome: WalkOutcome, error: Optional[BaseException] = None):
        super().__init__(outcome.value)
        self.outcome = outcome
        self.error = error


class ResultChannel:
    """Thread-safe, closeable, optionally bounded entry channel.

    The channel moves from open to closed exactly once; the first ``close``
    wins and later calls are ignored. After close, ``put`` discards its entry
    so nothing is ever published into a closed channel.

    A clean close (``COMPLETED``) lets the consumer drain what is buffered
    first. Any other close discards the buffer so the consumer sees the
    outcome on its very next ``get``.
    """

    def __init__(self, capacity: int = 0):
        """Initialize channel.

        Args:
            capacity: Maximum buffered entries; 0 means unbounded
        """
        self.capacity = capacity
        self._buffer: Deque[Entry] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._outcome = WalkOutcome.RUNNING
        self._error: Optional[BaseException] = None

    def put(self, entry: Entry) -> bool:
        """Publish an entry, blocking while a bounded channel is full.

        Returns:
            True if the entry was buffered, False if the channel is closed
        """
        with self._not_full:
            while self._is_full() and self._outcome is WalkOutcome.RUNNING:
                self._not_full.wait()
            if self._outcome is not WalkOutcome.RUNNING:
                return False
            self._buffer.append(entry)
            self._not_empty.notify()
            return True

    def get(self, timeout: Optional[float] = None) -> Entry:
        """Take the next entry, blocking while the channel is open and empty.

        Args:
            timeout: Maximum seconds to wait, None to wait forever

        Returns:
            The next Entry

        Raises:
            ChannelClosed: If the channel is closed and has nothing left
            TimeoutError: If ``timeout`` elapsed with nothing to return
        """
        with self._not_empty:
            if not self._not_empty.wait_for(
                lambda: self._buffer or self._outcome is not WalkOutcome.RUNNING,
                timeout,
            ):
                raise TimeoutError("no entry available")
            if self._buffer:
                entry = self._buffer.popleft()
                self._not_full.notify()
                return entry
            raise ChannelClosed(self._outcome, self._error)

    def close(self, outcome: WalkOutcome = WalkOutcome.COMPLETED,
              error: Optional[BaseException] = None) -> bool:
        """Close the channel.

        Args:
            outcome: Why the channel closes
            error: Fault that aborted the session, for ``FAILED``

        Returns:
            True if this call closed the channel, False if already closed
        """
        if outcome is WalkOutcome.RUNNING:
            raise ValueError("cannot close a channel with outcome RUNNING")

        with self._lock:
            if self._outcome is not WalkOutcome.RUNNING:
                return False
            self._outcome = outcome
            self._error = error
            if outcome is not WalkOutcome.COMPLETED:
                self._buffer.clear()
            self._not_empty.notify_all()
            self._not_full.notify_all()
            return True

    def _is_full(self) -> bool:
        return self.capacity > 0 and len(self._buffer) >= self.capacity

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._outcome is not WalkOutcome.RUNNING

    @property
    def outcome(self) -> WalkOutcome:
        with self._lock:
            return self._outcome

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)


class CompletionDetector:
    """Counts live workers and fires once when the last one retires."""

    def __init__(self, workers: int, on_complete: Callable[[], None]):
        """Initialize detector.

        Args:
            workers: Number of workers that will each call ``retire`` once
            on_complete: Called by the last retiring worker
        """
        if workers <= 0:
            raise ValueError("workers must be positive")
        self._active = workers
        self._lock = threading.Lock()
        self._on_complete = on_complete

    def retire(self) -> bool:
        """Record that one worker retired.

        Returns:
            True if the caller was the last active worker
        """
        with self._lock:
            if self._active <= 0:
                raise RuntimeError("more workers retired than were started")
            self._active -= 1
            last = self._active == 0

        if last:
            self._on_complete()
        return last

    @property
    def active(self) -> int:
        with self._lock:
            return self._active
