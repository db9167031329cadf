"""Child classification shared by the sync and aio walkers.

Turns each ``ChildInfo`` returned by a lister into at most one Entry to
publish and at most one WorkItem to push back onto the frontier. Pure
computation, no I/O.
"""

import fnmatch
from typing import Callable, NamedTuple, Optional

from .config import PSEUDO_ENTRIES, WalkConfig
from .entry import ChildInfo, Entry, WorkItem


class Dispatch(NamedTuple):
    """Routing decision for one child."""
    entry: Optional[Entry]          # Publish to the result channel
    work_item: Optional[WorkItem]   # Push onto the frontier


SKIP = Dispatch(None, None)


class ChildClassifier:
    """Routes lister children according to a ``WalkConfig``.

    Directories are always descended (within the depth bound) even when their
    own name does not match the pattern; the pattern only decides what gets
    published.
    """

    def __init__(self, config: WalkConfig, join: Callable[[str, str], str]):
        """Initialize classifier.

        Args:
            config: Walk configuration
            join: Lister hook building a child path from parent and name
        """
        self.config = config
        self._join = join
        self._match_all = config.pattern == '*'
        self._ignored = PSEUDO_ENTRIES | frozenset(config.ignored_names)

    def is_ignored(self, name: str) -> bool:
        """Check if a name is never reported nor descended."""
        return name in self._ignored

    def matches(self, name: str) -> bool:
        """Check a name against the configured glob pattern."""
        if self._match_all:
            return True
        return fnmatch.fnmatch(name, self.config.pattern)

    def classify(self, parent: WorkItem, child: ChildInfo) -> Dispatch:
        """Decide what happens to one child of ``parent``.

        Args:
            parent: Work item whose listing produced ``child``
            child: Record returned by the lister

        Returns:
            Dispatch with the entry to publish and the work item to push
        """
        if not child.name or self.is_ignored(child.name):
            return SKIP

        full_path = child.full_path or self._join(parent.path, child.name)
        depth = parent.depth + 1

        work_item = None
        if child.is_directory and self.config.should_enqueue(depth):
            work_item = WorkItem(full_path, depth)

        entry = None
        if self.config.wants(child.is_directory) and self.matches(child.name):
            entry = Entry.from_child(child, full_path, depth)

        return Dispatch(entry, work_item)
