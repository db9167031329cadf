"""Configuration system for FastWalkLib.

This module defines how users specify their walk requirements: what kind of
entries they want back, how deep to go, how many workers to run and how the
shared frontier orders pending directories.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Union

from .errors import InvalidArgumentError


# Names that are never reported or descended, whatever the pattern says.
DEFAULT_IGNORED_NAMES: FrozenSet[str] = frozenset({'Thumbs.db'})

# Self/parent pseudo-entries some listing primitives return.
PSEUDO_ENTRIES: FrozenSet[str] = frozenset({'.', '..'})


class ResultFilter(Enum):
    """Which kinds of entries are published to the consumer.

    Directories are always descended; this only controls emission.
    """
    FILES = "files"
    DIRECTORIES = "directories"
    BOTH = "both"

    @property
    def includes_files(self) -> bool:
        return self is not ResultFilter.DIRECTORIES

    @property
    def includes_directories(self) -> bool:
        return self is not ResultFilter.FILES


class FrontierOrder(Enum):
    """How the shared frontier hands out pending directories.

    The choice changes traversal order, never the set of results.
    """
    LIFO = "lifo"    # Stack - leans depth-first
    FIFO = "fifo"    # Queue - leans breadth-first


class DedupPolicy(Enum):
    """Which discovered objects go through the dedup guard."""
    DIRECTORIES = "directories"    # Claim every directory before expanding
    NONE = "none"                  # Expand every work item as pushed


def default_parallelism() -> int:
    """Worker count used when the caller does not pick one.

    Returns:
        Number of CPUs reported by the host, at least 1
    """
    return max(1, os.cpu_count() or 1)


def _is_int(value: Any) -> bool:
    # bool is an int subclass, but True is not a depth or a worker count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class WalkConfig:
    """Complete configuration for one walk session.

    This is the primary way users describe a walk. The entry points accept
    either a ``WalkConfig`` or the equivalent keyword arguments.
    """

    # What to report
    pattern: str = "*"                                # Glob matched against entry names
    result_filter: ResultFilter = ResultFilter.FILES
    ignored_names: FrozenSet[str] = field(default_factory=lambda: DEFAULT_IGNORED_NAMES)

    # Depth control
    max_depth: int = -1                               # < 1 means unbounded

    # Worker pool
    parallelism: Optional[int] = None                 # None -> default_parallelism()
    frontier_order: FrontierOrder = FrontierOrder.LIFO
    dedup: DedupPolicy = DedupPolicy.DIRECTORIES

    # Result channel
    channel_capacity: int = 0                         # 0 means unbounded
    raise_on_cancel: bool = True                      # Raise WalkCancelledError on drain

    # Idle workers re-check cancellation and exhaustion this often (seconds)
    poll_interval: float = 0.05

    # Convenience constructors for common configurations

    @classmethod
    def files_only(cls, pattern: str = "*", **kwargs) -> 'WalkConfig':
        """Create config reporting only files.

        Args:
            pattern: Glob matched against file names

        Returns:
            WalkConfig emitting files
        """
        return cls(pattern=pattern, result_filter=ResultFilter.FILES, **kwargs)

    @classmethod
    def directories_only(cls, pattern: str = "*", **kwargs) -> 'WalkConfig':
        """Create config reporting only directories.

        Args:
            pattern: Glob matched against directory names

        Returns:
            WalkConfig emitting directories
        """
        return cls(pattern=pattern, result_filter=ResultFilter.DIRECTORIES, **kwargs)

    @classmethod
    def shallow_scan(cls, max_depth: int = 1, **kwargs) -> 'WalkConfig':
        """Create config for a shallow scan of files and directories.

        Args:
            max_depth: How deep to report (default 1 = immediate children only)

        Returns:
            WalkConfig for shallow scanning
        """
        return cls(result_filter=ResultFilter.BOTH, max_depth=max_depth, **kwargs)

    @property
    def is_bounded(self) -> bool:
        """True when a depth bound is in effect."""
        return self.max_depth >= 1

    @property
    def effective_parallelism(self) -> int:
        """Worker count this config resolves to."""
        if self.parallelism is None:
            return default_parallelism()
        return self.parallelism

    def should_expand(self, depth: int) -> bool:
        """Check if a directory at this depth should be listed.

        Args:
            depth: Depth of the work item (root = 0)

        Returns:
            True if the item is within the depth bound
        """
        return not self.is_bounded or depth < self.max_depth

    def should_enqueue(self, child_depth: int) -> bool:
        """Check if a discovered directory is worth a work item.

        Args:
            child_depth: Depth the new work item would carry

        Returns:
            True if the child will be expanded once popped
        """
        return self.should_expand(child_depth)

    def wants(self, is_directory: bool) -> bool:
        """Check if the consumer asked for this kind of entry."""
        if is_directory:
            return self.result_filter.includes_directories
        return self.result_filter.includes_files

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.pattern, str) or not self.pattern:
            errors.append("pattern must be a non-empty string")

        if not isinstance(self.result_filter, ResultFilter):
            errors.append("result_filter must be a ResultFilter")

        if not isinstance(self.frontier_order, FrontierOrder):
            errors.append("frontier_order must be a FrontierOrder")

        if not isinstance(self.dedup, DedupPolicy):
            errors.append("dedup must be a DedupPolicy")

        if not _is_int(self.max_depth):
            errors.append("max_depth must be an integer")

        if self.parallelism is not None:
            if not _is_int(self.parallelism):
                errors.append("parallelism must be an integer")
            elif self.parallelism <= 0:
                errors.append("parallelism must be positive")

        if not _is_int(self.channel_capacity):
            errors.append("channel_capacity must be an integer")
        elif self.channel_capacity < 0:
            errors.append("channel_capacity cannot be negative")

        if not isinstance(self.poll_interval, (int, float)) or isinstance(self.poll_interval, bool):
            errors.append("poll_interval must be a number")
        elif self.poll_interval <= 0:
            errors.append("poll_interval must be positive")

        return errors


def resolve_config(
    config: Optional[WalkConfig] = None,
    *,
    pattern: Optional[str] = None,
    result_filter: Union[ResultFilter, str, None] = None,
    max_depth: Optional[int] = None,
    parallelism: Optional[int] = None,
) -> WalkConfig:
    """Merge entry-point keyword arguments into a validated config.

    Arguments left as None keep the value from ``config`` (or the
    ``WalkConfig`` default).

    Raises:
        InvalidArgumentError: If the resulting configuration is invalid
    """
    overrides = {}
    if pattern is not None:
        overrides['pattern'] = pattern
    if result_filter is not None:
        try:
            overrides['result_filter'] = ResultFilter(result_filter)
        except ValueError:
            raise InvalidArgumentError(f"unknown result_filter: {result_filter!r}") from None
    if max_depth is not None:
        overrides['max_depth'] = max_depth
    if parallelism is not None:
        overrides['parallelism'] = parallelism

    resolved = replace(config or WalkConfig(), **overrides)
    errors = resolved.validate()
    if errors:
        raise InvalidArgumentError("; ".join(errors))
    return resolved


def validate_root(root: Any) -> str:
    """Check the walk root and return it as a string.

    Raises:
        InvalidArgumentError: If ``root`` is not a non-empty path
    """
    if not isinstance(root, (str, os.PathLike)):
        raise InvalidArgumentError(f"root must be a path, not {type(root).__name__}")
    root_str = os.fspath(root)
    if not isinstance(root_str, str) or not root_str.strip():
        raise InvalidArgumentError("root must be a non-empty path")
    return root_str
