"""Cooperative cancellation shared by callers and workers.

A ``CancellationToken`` is a one-way flag. Workers poll ``is_cancelled`` at
the top of every iteration; blocking primitives register a callback so they
wake up as soon as the flag flips. The token is built on ``threading`` and is
safe to use from worker threads and from asyncio tasks alike.
"""

import threading
from typing import Callable, List, Optional


class CancellationToken:
    """One-shot, thread-safe cancellation flag with callbacks."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self._timer: Optional[threading.Timer] = None

    @classmethod
    def linked(cls, parent: Optional['CancellationToken']) -> 'CancellationToken':
        """Create a token that is cancelled whenever ``parent`` is.

        Cancelling the child never cancels the parent.

        Args:
            parent: Token to follow, or None for an independent token

        Returns:
            New CancellationToken
        """
        child = cls()
        if parent is not None:
            parent.register(child.cancel)
        return child

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation and run registered callbacks once."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        for callback in callbacks:
            callback()

    def cancel_after(self, seconds: float) -> None:
        """Cancel automatically once ``seconds`` have elapsed.

        This is how a timeout is composed from cancellation.
        """
        with self._lock:
            if self._event.is_set():
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(seconds, self.cancel)
            self._timer.daemon = True
            self._timer.start()

    def register(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation.

        If the token is already cancelled the callback runs immediately,
        on the calling thread.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def unregister(self, callback: Callable[[], None]) -> None:
        """Forget a callback registered with ``register``."""
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses.

        Returns:
            True if the token is cancelled
        """
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        state = "cancelled" if self.is_cancelled else "active"
        return f"CancellationToken({state})"
