"""Per-session counters and outcome."""

import threading
from enum import Enum
from typing import Dict


class WalkOutcome(Enum):
    """How a walk session ended, as seen by the consumer."""
    RUNNING = "running"
    COMPLETED = "completed"    # Every reachable directory was expanded
    CANCELLED = "cancelled"    # Stopped early through cancellation or close()
    FAILED = "failed"          # A worker fault aborted the session


class WalkStats:
    """Thread-safe counters updated by every worker of one session."""

    FIELDS = (
        'directories_listed',
        'directories_failed',
        'duplicates_skipped',
        'depth_skipped',
        'entries_emitted',
    )

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = dict.fromkeys(self.FIELDS, 0)

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[name] += amount

    def snapshot(self) -> Dict[str, int]:
        """Consistent copy of all counters."""
        with self._lock:
            return dict(self._counts)

    def __getattr__(self, name: str) -> int:
        if name in WalkStats.FIELDS:
            with self._lock:
                return self._counts[name]
        raise AttributeError(name)

    def __repr__(self) -> str:
        return f"WalkStats({self.snapshot()})"
