"""Exception hierarchy for FastWalkLib.

Only ``InvalidArgumentError``, ``WalkCancelledError`` and ``WalkerFaultError``
ever reach the consumer. ``DirectoryUnavailableError`` stays local to the
worker that hit it and is handed to the session's error policy.
"""

import errno
from enum import Enum
from typing import Optional


class WalkError(Exception):
    """Base class for every error raised by FastWalkLib."""


class InvalidArgumentError(WalkError, ValueError):
    """Bad root, pattern or configuration.

    Raised synchronously by the entry points, before any worker starts.
    """


class UnavailableReason(Enum):
    """Why a directory could not be listed."""
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    OTHER = "other"


class DirectoryUnavailableError(WalkError):
    """A single directory could not be listed.

    The walk skips the directory and carries on with every other branch.
    """

    def __init__(self, path: str, reason: UnavailableReason = UnavailableReason.OTHER,
                 message: Optional[str] = None):
        self.path = path
        self.reason = reason
        super().__init__(message or f"{reason.value}: {path}")

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> 'DirectoryUnavailableError':
        """Classify an ``OSError`` raised while listing ``path``.

        Args:
            path: Directory that was being listed
            error: The raised error

        Returns:
            DirectoryUnavailableError chained to ``error``
        """
        if isinstance(error, (FileNotFoundError, NotADirectoryError)):
            reason = UnavailableReason.NOT_FOUND
        elif isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
            reason = UnavailableReason.ACCESS_DENIED
        else:
            reason = UnavailableReason.OTHER

        unavailable = cls(path, reason, f"{reason.value}: {path}: {error}")
        unavailable.__cause__ = error
        return unavailable


class WalkCancelledError(WalkError):
    """The walk was stopped early through its cancellation token.

    Surfaced once to the consumer so a cancelled walk can be told apart from
    one that finished normally.
    """


class WalkerFaultError(WalkError):
    """A worker hit an unexpected exception and the session was aborted.

    The original exception is available as ``__cause__``.
    """
