"""Dedup guard: makes sure no directory is expanded twice in one walk."""

import threading
from typing import Set


class DedupGuard:
    """Thread-safe claim-or-skip set of directory keys.

    Membership is permanent for the lifetime of a session; keys are never
    removed. Reaching the same directory through a second path (a symlink,
    a junction, a duplicate push) therefore costs one failed claim instead
    of a second listing.
    """

    def __init__(self):
        self._claimed: Set[str] = set()
        self._lock = threading.Lock()

    def claim(self, key: str) -> bool:
        """Claim ``key`` for expansion.

        Args:
            key: Canonical directory key

        Returns:
            True the first time ``key`` is claimed, False afterwards
        """
        with self._lock:
            if key in self._claimed:
                return False
            self._claimed.add(key)
            return True

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._claimed

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)


class NullGuard:
    """Guard used with ``DedupPolicy.NONE``: every claim succeeds."""

    def claim(self, key: str) -> bool:
        return True

    def __contains__(self, key: str) -> bool:
        return False

    def __len__(self) -> int:
        return 0
