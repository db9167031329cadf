"""Configuration re-export for the sync package.

Re-exports configuration components from the _common package so that
``from fastwalklib.sync.config import WalkConfig`` works.
"""

from .._common.config import (
    DEFAULT_IGNORED_NAMES,
    WalkConfig,
    ResultFilter,
    FrontierOrder,
    DedupPolicy,
    default_parallelism,
)

__all__ = [
    'DEFAULT_IGNORED_NAMES',
    'WalkConfig',
    'ResultFilter',
    'FrontierOrder',
    'DedupPolicy',
    'default_parallelism',
]
