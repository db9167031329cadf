"""Async filesystem lister.

Runs ``ScandirLister`` off the event loop. Each directory is listed in one
worker thread call, so a slow disk or network share never stalls the loop
and the number of open directory handles is bounded by ``max_concurrent``.
"""

from ...sync.adapters.filesystem import ScandirLister
from ..core.lister import ThreadedLister


class AsyncScandirLister(ThreadedLister):
    """Async lister for the local filesystem."""

    def __init__(self, follow_symlinks: bool = False, max_concurrent: int = 100):
        """Initialize async filesystem lister.

        Args:
            follow_symlinks: See ``ScandirLister``
            max_concurrent: Maximum directories listed at once
        """
        self.follow_symlinks = follow_symlinks
        super().__init__(ScandirLister(follow_symlinks=follow_symlinks), max_concurrent)

    def __repr__(self) -> str:
        return (f"AsyncScandirLister(follow_symlinks={self.follow_symlinks}, "
                f"max_concurrent={self.max_concurrent})")
