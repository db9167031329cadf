"""Thread-based implementation of FastWalkLib.

Workers are OS threads pulling from a shared frontier; the consumer drains a
plain iterator. Use this flavour from ordinary synchronous code.
"""

# Core components
from .core import (
    Lister,
    Frontier,
    ResultChannel,
    ChannelClosed,
    CompletionDetector,
    ParallelWalker,
    EntryStream,
)

# Listers
from .adapters import ScandirLister

# Configuration, records and errors (re-exported from _common)
from .config import (
    WalkConfig,
    ResultFilter,
    FrontierOrder,
    DedupPolicy,
)
from .._common import (
    CancellationToken,
    ChildInfo,
    Entry,
    WorkItem,
    DedupGuard,
    WalkOutcome,
    WalkStats,
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    WalkError,
    InvalidArgumentError,
    DirectoryUnavailableError,
    UnavailableReason,
    WalkCancelledError,
    WalkerFaultError,
)

# High-level API
from .api import (
    enumerate_entries,
    find_files,
    find_directories,
    collect_entries,
    count_entries,
    calculate_size,
)

__all__ = [
    # Core
    'Lister',
    'Frontier',
    'ResultChannel',
    'ChannelClosed',
    'CompletionDetector',
    'ParallelWalker',
    'EntryStream',
    'DedupGuard',
    'CancellationToken',
    # Listers
    'ScandirLister',
    # Config
    'WalkConfig',
    'ResultFilter',
    'FrontierOrder',
    'DedupPolicy',
    # Records
    'ChildInfo',
    'Entry',
    'WorkItem',
    'WalkOutcome',
    'WalkStats',
    # Errors
    'ErrorPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'WalkError',
    'InvalidArgumentError',
    'DirectoryUnavailableError',
    'UnavailableReason',
    'WalkCancelledError',
    'WalkerFaultError',
    # API
    'enumerate_entries',
    'find_files',
    'find_directories',
    'collect_entries',
    'count_entries',
    'calculate_size',
]
