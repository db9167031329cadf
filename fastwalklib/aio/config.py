"""Configuration re-export for the aio package."""

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
