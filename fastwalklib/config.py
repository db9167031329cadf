"""Configuration for FastWalkLib walks.

Re-exports the shared configuration so ``from fastwalklib.config import
WalkConfig`` works without picking a flavour.
"""

from ._common.config import (
    DEFAULT_IGNORED_NAMES,
    PSEUDO_ENTRIES,
    WalkConfig,
    ResultFilter,
    FrontierOrder,
    DedupPolicy,
    default_parallelism,
    resolve_config,
)

__all__ = [
    'DEFAULT_IGNORED_NAMES',
    'PSEUDO_ENTRIES',
    'WalkConfig',
    'ResultFilter',
    'FrontierOrder',
    'DedupPolicy',
    'default_parallelism',
    'resolve_config',
]
