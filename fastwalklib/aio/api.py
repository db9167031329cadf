"""High-level async API for FastWalkLib.

This module provides simple async functions for common walks. All of them
run on ``AsyncParallelWalker``.
"""

import os
from typing import Dict, List, Optional, Union

from .._common import (
    CancellationToken,
    Entry,
    ErrorPolicy,
    ResultFilter,
    WalkConfig,
    resolve_config,
    validate_root,
)
from ..sync.core.lister import Lister
from .adapters.filesystem import AsyncScandirLister
from .core.lister import AsyncLister, ThreadedLister
from .core.walker import AsyncEntryStream, AsyncParallelWalker

PathLike = Union[str, os.PathLike]


def enumerate_entries_async(
    root: PathLike,
    pattern: Optional[str] = None,
    result_filter: Union[ResultFilter, str, None] = None,
    max_depth: Optional[int] = None,
    parallelism: Optional[int] = None,
    cancellation: Optional[CancellationToken] = None,
    *,
    lister: Union[AsyncLister, Lister, None] = None,
    config: Optional[WalkConfig] = None,
    error_policy: Optional[ErrorPolicy] = None,
) -> AsyncEntryStream:
    """Walk a tree with a pool of worker tasks.

    Must be called from a running event loop. The workers are scheduled
    before this function returns; drain the stream with ``async for``.

    Args:
        root: Directory to walk
        pattern: Glob matched against entry names (default '*')
        result_filter: Files, directories or both (default files)
        max_depth: Deepest entry depth to report; < 1 means unbounded
        parallelism: Number of worker tasks (default: CPU count)
        cancellation: Token that stops the walk when cancelled
        lister: Async lister, or a blocking ``Lister`` which is wrapped in
            ``ThreadedLister`` (default: AsyncScandirLister())
        config: Base configuration; explicit arguments above override it
        error_policy: Receives per-directory failures

    Returns:
        AsyncEntryStream yielding Entry objects in discovery order

    Example:
        >>> async with enumerate_entries_async("/data", "*.csv") as entries:
        ...     async for entry in entries:
        ...         print(entry.full_path)
    """
    root = validate_root(root)
    resolved = resolve_config(
        config,
        pattern=pattern,
        result_filter=result_filter,
        max_depth=max_depth,
        parallelism=parallelism,
    )
    if lister is None:
        lister = AsyncScandirLister()
    elif isinstance(lister, Lister):
        lister = ThreadedLister(lister)

    walker = AsyncParallelWalker(
        root,
        lister,
        config=resolved,
        cancellation=cancellation,
        error_policy=error_policy,
    )
    return walker.start()


def find_files_async(root: PathLike, pattern: str = "*", max_depth: int = -1,
                     **kwargs) -> AsyncEntryStream:
    """Stream the files under ``root`` whose names match ``pattern``."""
    return enumerate_entries_async(root, pattern, ResultFilter.FILES, max_depth, **kwargs)


def find_directories_async(root: PathLike, pattern: str = "*", max_depth: int = -1,
                           **kwargs) -> AsyncEntryStream:
    """Stream the directories under ``root`` whose names match ``pattern``."""
    return enumerate_entries_async(root, pattern, ResultFilter.DIRECTORIES, max_depth, **kwargs)


async def collect_entries_async(root: PathLike, **kwargs) -> List[Entry]:
    """Walk ``root`` to the end and return every entry as a list.

    Raises:
        WalkCancelledError: If the walk was cancelled before it finished
    """
    async with enumerate_entries_async(root, **kwargs) as entries:
        return [entry async for entry in entries]


async def count_entries_async(root: PathLike, **kwargs) -> Dict[str, int]:
    """Count files and directories under ``root``.

    Returns:
        Dictionary with 'files', 'directories' and 'total' counts
    """
    kwargs.setdefault('result_filter', ResultFilter.BOTH)
    counts = {'files': 0, 'directories': 0}
    async with enumerate_entries_async(root, **kwargs) as entries:
        async for entry in entries:
            counts['directories' if entry.is_directory else 'files'] += 1
    counts['total'] = counts['files'] + counts['directories']
    return counts


async def calculate_size_async(root: PathLike, **kwargs) -> int:
    """Total size in bytes of the files under ``root``."""
    kwargs['result_filter'] = ResultFilter.FILES
    total = 0
    async with enumerate_entries_async(root, **kwargs) as entries:
        async for entry in entries:
            total += entry.size
    return total
