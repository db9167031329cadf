"""Asyncio implementation of FastWalkLib.

Workers are tasks on the running event loop; blocking listings run in
worker threads through ``ThreadedLister``. Use this flavour from async code.
"""

# Core components
from .core import (
    AsyncLister,
    ThreadedLister,
    AsyncFrontier,
    AsyncResultChannel,
    AsyncParallelWalker,
    AsyncEntryStream,
)

# Listers
from .adapters import AsyncScandirLister

# Configuration (re-exported from _common)
from .config import (
    WalkConfig,
    ResultFilter,
    FrontierOrder,
    DedupPolicy,
)

# High-level API
from .api import (
    enumerate_entries_async,
    find_files_async,
    find_directories_async,
    collect_entries_async,
    count_entries_async,
    calculate_size_async,
)

__all__ = [
    # Core
    'AsyncLister',
    'ThreadedLister',
    'AsyncFrontier',
    'AsyncResultChannel',
    'AsyncParallelWalker',
    'AsyncEntryStream',
    # Listers
    'AsyncScandirLister',
    # Config
    'WalkConfig',
    'ResultFilter',
    'FrontierOrder',
    'DedupPolicy',
    # API
    'enumerate_entries_async',
    'find_files_async',
    'find_directories_async',
    'collect_entries_async',
    'count_entries_async',
    'calculate_size_async',
]
