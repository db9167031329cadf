"""Lister abstraction for FastWalkLib.

The Lister is the one piece of the walk that touches the namespace being
walked. It lists the immediate children of ONE directory and nothing else;
the walker owns recursion, concurrency, dedup and depth.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Set

from ..._common import CancellationToken, ChildInfo


class Lister(ABC):
    """Abstract capability for listing one directory of a tree.

    The Lister pattern is what lets the walker work on ANY tree-shaped
    namespace. Subclasses only need ``list_children``; the path hooks have
    filesystem defaults and can be overridden for other naming schemes.

    Implementations are called concurrently from every worker and must not
    keep per-call state between calls. Any OS handle opened by a call must be
    released before the call returns.
    """

    def __init__(self):
        self._capabilities = self._define_capabilities()

    @abstractmethod
    def list_children(
        self,
        path: str,
        cancellation: Optional[CancellationToken] = None
    ) -> Sequence[ChildInfo]:
        """List the immediate children of a directory.

        Args:
            path: Directory to list
            cancellation: Token to poll during long listings; a lister may
                return early once it is cancelled

        Returns:
            Finite sequence of ChildInfo records

        Raises:
            DirectoryUnavailableError: If the directory cannot be listed.
                A plain OSError is accepted too and classified by the walker.
        """
        pass

    def normalize_root(self, path: str) -> str:
        """Turn the caller's root into the absolute path used for entries.

        Args:
            path: Root as given by the caller

        Returns:
            Absolute, normalized path
        """
        return os.path.abspath(path)

    def join(self, parent: str, name: str) -> str:
        """Build a child's full path.

        Args:
            parent: Full path of the listed directory
            name: Leaf name of the child

        Returns:
            Full path of the child
        """
        return os.path.join(parent, name)

    def canonical_path(self, path: str) -> str:
        """Key under which a directory is claimed in the dedup guard.

        Two paths naming the same directory should return the same key.
        Default implementation only folds case where the OS does.

        Args:
            path: Full path of a directory

        Returns:
            Canonical key
        """
        return os.path.normcase(path)

    # Capability flags - listers declare what they support

    def supports_capability(self, capability: str) -> bool:
        """Check if lister supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define lister capabilities.

        Override in subclasses to declare supported features.

        Returns:
            Set of capability names
        """
        return {'list_children'}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
