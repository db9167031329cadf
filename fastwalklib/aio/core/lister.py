"""Async lister abstraction.

Defines how a namespace is listed from asyncio code. ``ThreadedLister``
adapts any blocking ``Lister`` by running each listing in a worker thread
behind a semaphore, so the event loop never blocks on I/O.
"""

import asyncio
import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Set

from ..._common import CancellationToken, ChildInfo
from ...sync.core.lister import Lister


class AsyncLister(ABC):
    """Abstract base class for async listers.

    Mirrors ``Lister`` with an awaitable ``list_children``. The path hooks
    are synchronous because they are pure computation.
    """

    def __init__(self, max_concurrent: int = 100):
        """Initialize lister with concurrency control.

        Args:
            max_concurrent: Maximum concurrent listing operations
        """
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self._capabilities = self._define_capabilities()

    @abstractmethod
    async def list_children(
        self,
        path: str,
        cancellation: Optional[CancellationToken] = None
    ) -> Sequence[ChildInfo]:
        """List the immediate children of a directory.

        Args:
            path: Directory to list
            cancellation: Token the lister may poll

        Returns:
            Finite sequence of ChildInfo records

        Raises:
            DirectoryUnavailableError: If the directory cannot be listed
        """
        pass

    def normalize_root(self, path: str) -> str:
        """Absolute, normalized root. See ``Lister.normalize_root``."""
        return os.path.abspath(path)

    def join(self, parent: str, name: str) -> str:
        return os.path.join(parent, name)

    def canonical_path(self, path: str) -> str:
        """Dedup key for a directory. See ``Lister.canonical_path``."""
        return os.path.normcase(path)

    def supports_capability(self, capability: str) -> bool:
        """Check if lister supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define lister capabilities.

        Override in subclasses to declare supported features.

        Returns:
            Set of capability names
        """
        return {
            'list_children',
            'async',
        }

    async def get_stats(self) -> dict:
        """Get lister statistics.

        Returns:
            Dictionary of statistics
        """
        return {
            'max_concurrent': self.max_concurrent,
            'available_permits': self.semaphore._value if hasattr(self.semaphore, '_value') else None,
        }

    async def close(self):
        """Clean up lister resources.

        Override if the lister holds connections or handles.
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


class ThreadedLister(AsyncLister):
    """Runs a blocking ``Lister`` in worker threads.

    Every listing goes through ``asyncio.to_thread`` while holding the
    semaphore, which bounds how many directories are open at once.
    """

    def __init__(self, lister: Lister, max_concurrent: int = 100):
        """Initialize threaded lister.

        Args:
            lister: Blocking lister to wrap
            max_concurrent: Maximum listings running in threads at once
        """
        self.base_lister = lister
        super().__init__(max_concurrent)

    async def list_children(
        self,
        path: str,
        cancellation: Optional[CancellationToken] = None
    ) -> Sequence[ChildInfo]:
        async with self.semaphore:
            if cancellation is not None and cancellation.is_cancelled:
                return []
            return await asyncio.to_thread(self.base_lister.list_children, path, cancellation)

    def normalize_root(self, path: str) -> str:
        return self.base_lister.normalize_root(path)

    def join(self, parent: str, name: str) -> str:
        return self.base_lister.join(parent, name)

    def canonical_path(self, path: str) -> str:
        return self.base_lister.canonical_path(path)

    def _define_capabilities(self) -> Set[str]:
        base_caps = self.base_lister._capabilities if hasattr(self.base_lister, '_capabilities') else set()
        return super()._define_capabilities() | base_caps | {'threaded'}

    def __repr__(self) -> str:
        return f"ThreadedLister({self.base_lister!r}, max_concurrent={self.max_concurrent})"
