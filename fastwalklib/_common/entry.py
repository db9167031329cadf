"""Data records passed between listers, workers and the consumer."""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, NamedTuple, Optional


class ChildInfo(NamedTuple):
    """One child as reported by a lister.

    ``full_path`` is optional; when a lister leaves it out the walker joins
    the parent path and ``name`` through the lister's ``join`` hook.
    """
    name: str
    is_directory: bool
    size: int = 0
    attributes: int = 0
    full_path: Optional[str] = None


class WorkItem(NamedTuple):
    """A directory waiting in the frontier to be expanded."""
    path: str
    depth: int


@dataclass(frozen=True)
class Entry:
    """One discovered file or directory.

    Entries are built once by the worker that found them and never change
    afterwards. ``depth`` is the distance from the walk root, so the root's
    immediate children have depth 1.
    """

    name: str
    full_path: str
    is_directory: bool
    size: int
    attributes: int
    depth: int

    @classmethod
    def from_child(cls, child: ChildInfo, full_path: str, depth: int) -> 'Entry':
        """Build an entry for a lister child.

        Args:
            child: Record returned by the lister
            full_path: Absolute path of the child
            depth: Distance from the walk root

        Returns:
            Entry with size forced to 0 for directories
        """
        size = 0 if child.is_directory else max(0, int(child.size or 0))
        return cls(
            name=child.name,
            full_path=full_path,
            is_directory=child.is_directory,
            size=size,
            attributes=child.attributes or 0,
            depth=depth,
        )

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @property
    def directory_name(self) -> str:
        """Path of the directory that contains this entry."""
        return os.path.dirname(self.full_path)

    @property
    def exists(self) -> bool:
        """Whether the entry is still on disk, checked at access time.

        A dangling symlink still counts as existing.
        """
        return os.path.lexists(self.full_path)

    @property
    def extension(self) -> str:
        """File extension including the dot, or '' for none."""
        if self.is_directory:
            return ''
        return os.path.splitext(self.name)[1]

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view, in the shape of the metadata collectors."""
        data = asdict(self)
        data['type'] = 'directory' if self.is_directory else 'file'
        return data

    def __str__(self) -> str:
        return self.full_path
