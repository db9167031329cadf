"""Common components shared between sync and aio implementations.

This internal package contains non-I/O code that is identical between
both implementations. It should NOT be imported directly by users.

Components here include:
- Configuration classes (WalkConfig)
- Data records (Entry, WorkItem, ChildInfo)
- Errors, error policies and the cancellation token
- Pure-computation helpers (dedup guard, child classification, stats)

Important: This package must NEVER import from sync or aio to avoid
circular dependencies.
"""

from .config import (
    DEFAULT_IGNORED_NAMES,
    WalkConfig,
    ResultFilter,
    FrontierOrder,
    DedupPolicy,
    default_parallelism,
    resolve_config,
    validate_root,
)
from .entry import ChildInfo, Entry, WorkItem
from .errors import (
    WalkError,
    InvalidArgumentError,
    DirectoryUnavailableError,
    UnavailableReason,
    WalkCancelledError,
    WalkerFaultError,
)
from .cancellation import CancellationToken
from .guard import DedupGuard, NullGuard
from .dispatch import ChildClassifier, Dispatch
from .error_policies import ErrorPolicy, ContinueOnErrorsPolicy, CollectErrorsPolicy
from .stats import WalkOutcome, WalkStats

__all__ = [
    # Configuration
    'DEFAULT_IGNORED_NAMES',
    'WalkConfig',
    'ResultFilter',
    'FrontierOrder',
    'DedupPolicy',
    'default_parallelism',
    'resolve_config',
    'validate_root',
    # Records
    'ChildInfo',
    'Entry',
    'WorkItem',
    # Errors
    'WalkError',
    'InvalidArgumentError',
    'DirectoryUnavailableError',
    'UnavailableReason',
    'WalkCancelledError',
    'WalkerFaultError',
    # Shared primitives
    'CancellationToken',
    'DedupGuard',
    'NullGuard',
    'ChildClassifier',
    'Dispatch',
    # Error policies
    'ErrorPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    # Session state
    'WalkOutcome',
    'WalkStats',
]
