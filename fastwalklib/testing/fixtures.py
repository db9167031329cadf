"""Test fixtures for FastWalkLib consumers.

``InMemoryLister`` walks a hand-built tree described as nested dicts, so a
test can state the exact shape of a namespace, add links that make one
directory reachable twice, inject listing failures and slow listings down.
``expected_entries`` is the matching oracle: a plain recursive walk of the
same dict.
"""

import posixpath
import random
import stat
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from .._common import (
    CancellationToken,
    ChildInfo,
    DirectoryUnavailableError,
    ResultFilter,
    UnavailableReason,
)
from ..sync.core.lister import Lister

DIRECTORY_ATTRIBUTES = stat.S_IFDIR | 0o755
FILE_ATTRIBUTES = stat.S_IFREG | 0o644


class Link:
    """Tree value standing for a directory link (symlink, junction).

    Listing a link lists its target; the link itself is reported as a
    directory named after its key in the parent dict.
    """

    def __init__(self, target: str):
        self.target = target

    def __repr__(self) -> str:
        return f"Link({self.target!r})"


TreeSpec = Mapping[str, Any]
Failure = Union[UnavailableReason, BaseException]


class InMemoryLister(Lister):
    """Lister over an in-memory tree.

    Tree format: a dict whose values are dicts (directories), ints (files of
    that size), None (empty file) or ``Link`` objects.

    Example:
        lister = InMemoryLister({
            'a.txt': 10,
            'sub': {'c.txt': 3},
        }, root='/r')
    """

    def __init__(
        self,
        tree: TreeSpec,
        root: str = '/r',
        failures: Optional[Mapping[str, Failure]] = None,
        delay: float = 0.0,
        delays: Optional[Mapping[str, float]] = None,
    ):
        """Initialize in-memory lister.

        Args:
            tree: Nested dict describing the directory at ``root``
            root: Absolute path of the tree's root
            failures: Path -> reason (raised as DirectoryUnavailableError) or
                exception instance (raised as-is) when that path is listed
            delay: Seconds every listing sleeps before returning
            delays: Per-path sleep overriding ``delay``
        """
        super().__init__()
        self.tree = tree
        self.root = self.normalize_root(root)
        self.failures = dict(failures or {})
        self.delay = delay
        self.delays = dict(delays or {})
        self.listed: List[str] = []
        self._lock = threading.Lock()

    def list_children(
        self,
        path: str,
        cancellation: Optional[CancellationToken] = None
    ) -> List[ChildInfo]:
        with self._lock:
            self.listed.append(path)

        pause = self.delays.get(path, self.delay)
        if pause:
            time.sleep(pause)

        failure = self.failures.get(path)
        if isinstance(failure, UnavailableReason):
            raise DirectoryUnavailableError(path, failure)
        if failure is not None:
            raise failure

        node = self._resolve(path)
        if not isinstance(node, dict):
            raise DirectoryUnavailableError(path, UnavailableReason.NOT_FOUND)

        children = []
        for name, value in node.items():
            if isinstance(value, (dict, Link)):
                children.append(ChildInfo(name, True, 0, DIRECTORY_ATTRIBUTES))
            else:
                children.append(ChildInfo(name, False, value or 0, FILE_ATTRIBUTES))
        return children

    def normalize_root(self, path: str) -> str:
        return posixpath.normpath('/' + str(path).replace('\\', '/').lstrip('/'))

    def join(self, parent: str, name: str) -> str:
        return posixpath.join(parent, name)

    def canonical_path(self, path: str) -> str:
        """Resolve links so both spellings of a linked directory share a key."""
        return self._real_path(path)

    def list_count(self, path: str) -> int:
        """How many times ``path`` was listed."""
        with self._lock:
            return self.listed.count(path)

    def _components(self, path: str) -> List[str]:
        relative = posixpath.relpath(path, self.root)
        if relative == '.':
            return []
        return relative.split('/')

    def _resolve(self, path: str, hops: int = 0) -> Any:
        if hops > 32:
            return None
        if path != self.root and not path.startswith(self.root.rstrip('/') + '/'):
            return None

        node: Any = self.tree
        for part in self._components(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
            if isinstance(node, Link):
                node = self._resolve(node.target, hops + 1)
        return node

    def _real_path(self, path: str, hops: int = 0) -> str:
        if hops > 32 or (path != self.root
                         and not path.startswith(self.root.rstrip('/') + '/')):
            return path

        node: Any = self.tree
        real = self.root
        for part in self._components(path):
            child = node.get(part) if isinstance(node, dict) else None
            if isinstance(child, Link):
                real = self._real_path(child.target, hops + 1)
                node = self._resolve(child.target, hops + 1)
            else:
                real = posixpath.join(real, part)
                node = child
        return real

    def __repr__(self) -> str:
        return f"InMemoryLister(root={self.root!r})"


def expected_entries(
    tree: TreeSpec,
    root: str = '/r',
    max_depth: int = -1,
    result_filter: ResultFilter = ResultFilter.BOTH,
    skip: Optional[Set[str]] = None,
) -> Set[Tuple[str, int]]:
    """Oracle: ``(full_path, depth)`` of every entry a walk should report.

    Links are reported but not followed.

    Args:
        tree: Same dict handed to InMemoryLister
        root: Same root handed to InMemoryLister
        max_depth: Depth bound (< 1 means unbounded)
        result_filter: Which kinds of entries to include
        skip: Directory paths whose contents are unreachable (failures)
    """
    skip = skip or set()
    found: Set[Tuple[str, int]] = set()

    def visit(node: TreeSpec, path: str, depth: int) -> None:
        if path in skip:
            return
        for name, value in node.items():
            child_path = posixpath.join(path, name)
            is_dir = isinstance(value, (dict, Link))
            wanted = result_filter.includes_directories if is_dir else result_filter.includes_files
            if wanted:
                found.add((child_path, depth + 1))
            if isinstance(value, dict) and (max_depth < 1 or depth + 1 < max_depth):
                visit(value, child_path, depth + 1)

    visit(tree, posixpath.normpath(root), 0)
    return found


def random_tree(seed: int, max_depth: int = 4, max_children: int = 6,
                directory_ratio: float = 0.35) -> Dict[str, Any]:
    """Build a reproducible random tree for property-style tests."""
    rng = random.Random(seed)

    def build(depth: int) -> Dict[str, Any]:
        node: Dict[str, Any] = {}
        for index in range(rng.randint(0, max_children)):
            if depth < max_depth and rng.random() < directory_ratio:
                node[f"dir{depth}_{index}"] = build(depth + 1)
            else:
                node[f"file{depth}_{index}.txt"] = rng.randint(0, 4096)
        return node

    return build(0)


def build_tree_on_disk(base: Path, tree: TreeSpec) -> None:
    """Materialize a tree dict under ``base`` (links are skipped)."""
    base = Path(base)
    base.mkdir(parents=True, exist_ok=True)
    for name, value in tree.items():
        target = base / name
        if isinstance(value, dict):
            build_tree_on_disk(target, value)
        elif isinstance(value, Link):
            continue
        else:
            target.write_bytes(b'x' * (value or 0))
