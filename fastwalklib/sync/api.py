"""High-level API for the thread-based walker.

This module provides simple, functional interfaces for common walks. These
functions wrap ``ParallelWalker`` for ease of use in simple cases.
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
from .adapters.filesystem import ScandirLister
from .core.lister import Lister
from .core.walker import EntryStream, ParallelWalker

PathLike = Union[str, os.PathLike]


def enumerate_entries(
    root: PathLike,
    pattern: Optional[str] = None,
    result_filter: Union[ResultFilter, str, None] = None,
    max_depth: Optional[int] = None,
    parallelism: Optional[int] = None,
    cancellation: Optional[CancellationToken] = None,
    *,
    lister: Optional[Lister] = None,
    config: Optional[WalkConfig] = None,
    error_policy: Optional[ErrorPolicy] = None,
) -> EntryStream:
    """Walk a tree with a pool of worker threads.

    This is the primary entry point. Workers start before this function
    returns; the caller drains the returned stream while they run.

    Args:
        root: Directory to walk
        pattern: Glob matched against entry names (default '*')
        result_filter: Files, directories or both (default files)
        max_depth: Deepest entry depth to report; < 1 means unbounded
        parallelism: Number of worker threads (default: CPU count)
        cancellation: Token that stops the walk when cancelled
        lister: Lister for the namespace (default: ScandirLister())
        config: Base configuration; explicit arguments above override it
        error_policy: Receives per-directory failures

    Returns:
        EntryStream yielding Entry objects in discovery order

    Raises:
        InvalidArgumentError: If root, pattern or config is invalid

    Example:
        >>> with enumerate_entries("/var/log", "*.log", max_depth=2) as entries:
        ...     for entry in entries:
        ...         print(entry.full_path, entry.size)
    """
    root = validate_root(root)
    resolved = resolve_config(
        config,
        pattern=pattern,
        result_filter=result_filter,
        max_depth=max_depth,
        parallelism=parallelism,
    )
    walker = ParallelWalker(
        root,
        lister or ScandirLister(),
        config=resolved,
        cancellation=cancellation,
        error_policy=error_policy,
    )
    return walker.start()


def find_files(root: PathLike, pattern: str = "*", max_depth: int = -1,
               **kwargs) -> EntryStream:
    """Stream the files under ``root`` whose names match ``pattern``.

    Example:
        >>> for entry in find_files("/src", "*.py"):
        ...     print(entry.full_path)
    """
    return enumerate_entries(root, pattern, ResultFilter.FILES, max_depth, **kwargs)


def find_directories(root: PathLike, pattern: str = "*", max_depth: int = -1,
                     **kwargs) -> EntryStream:
    """Stream the directories under ``root`` whose names match ``pattern``."""
    return enumerate_entries(root, pattern, ResultFilter.DIRECTORIES, max_depth, **kwargs)


def collect_entries(root: PathLike, **kwargs) -> List[Entry]:
    """Walk ``root`` to the end and return every entry as a list.

    Accepts the same keyword arguments as ``enumerate_entries``.

    Raises:
        WalkCancelledError: If the walk was cancelled before it finished
    """
    with enumerate_entries(root, **kwargs) as entries:
        return list(entries)


def count_entries(root: PathLike, **kwargs) -> Dict[str, int]:
    """Count files and directories under ``root``.

    Returns:
        Dictionary with 'files', 'directories' and 'total' counts
    """
    kwargs.setdefault('result_filter', ResultFilter.BOTH)
    counts = {'files': 0, 'directories': 0}
    with enumerate_entries(root, **kwargs) as entries:
        for entry in entries:
            counts['directories' if entry.is_directory else 'files'] += 1
    counts['total'] = counts['files'] + counts['directories']
    return counts


def calculate_size(root: PathLike, **kwargs) -> int:
    """Total size in bytes of the files under ``root``."""
    kwargs['result_filter'] = ResultFilter.FILES
    with enumerate_entries(root, **kwargs) as entries:
        return sum(entry.size for entry in entries)
