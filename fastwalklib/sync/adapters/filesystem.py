"""Filesystem lister for FastWalkLib.

Lists one directory with ``os.scandir``. The scandir handle is opened and
closed inside a single ``list_children`` call, and the stat information
cached on each ``DirEntry`` is turned into plain ``ChildInfo`` records before
the call returns.
"""

import os
from typing import List, Optional, Set

from ..._common import CancellationToken, ChildInfo, DirectoryUnavailableError
from ..core.lister import Lister


class ScandirLister(Lister):
    """Lister for the local filesystem built on ``os.scandir``.

    ``attributes`` carries ``st_file_attributes`` on Windows and ``st_mode``
    everywhere else.
    """

    def __init__(self, follow_symlinks: bool = False):
        """Initialize filesystem lister.

        Args:
            follow_symlinks: Whether symlinks to directories are reported as
                directories (and therefore descended). When False a symlink
                is reported as a non-directory entry with its own lstat data.
        """
        super().__init__()
        self.follow_symlinks = follow_symlinks

    def list_children(
        self,
        path: str,
        cancellation: Optional[CancellationToken] = None
    ) -> List[ChildInfo]:
        """List a directory with ``os.scandir``.

        Args:
            path: Directory to list
            cancellation: Polled once per directory entry

        Returns:
            ChildInfo for every child that could be stat'ed

        Raises:
            DirectoryUnavailableError: If the directory cannot be opened or read
        """
        children = []
        try:
            with os.scandir(path) as iterator:
                for entry in iterator:
                    if cancellation is not None and cancellation.is_cancelled:
                        break
                    child = self._child_info(entry)
                    if child is not None:
                        children.append(child)
        except OSError as error:
            raise DirectoryUnavailableError.from_os_error(path, error) from error
        return children

    def _child_info(self, entry: os.DirEntry) -> Optional[ChildInfo]:
        """Convert a DirEntry, or None if it vanished before it was stat'ed."""
        try:
            st = entry.stat(follow_symlinks=self.follow_symlinks)
            is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
        except OSError:
            # Broken symlink when following: fall back to the link itself
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                return None
            is_dir = False

        return ChildInfo(
            name=entry.name,
            is_directory=is_dir,
            size=0 if is_dir else st.st_size,
            attributes=getattr(st, 'st_file_attributes', st.st_mode),
            full_path=entry.path,
        )

    def canonical_path(self, path: str) -> str:
        """Resolve symlinks so that every spelling of a directory shares a key."""
        return os.path.normcase(os.path.realpath(path))

    def _define_capabilities(self) -> Set[str]:
        """Define filesystem lister capabilities.

        Returns:
            Set of supported capabilities
        """
        return super()._define_capabilities() | {
            'stat',
            'size',
            'symlinks',
            'cancellable',
        }

    def __repr__(self) -> str:
        return f"ScandirLister(follow_symlinks={self.follow_symlinks})"
