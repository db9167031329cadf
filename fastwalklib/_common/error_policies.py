"""
Error handling policies for FastWalkLib.

A walk never aborts because one directory could not be listed. Instead the
worker that hit the failure hands a ``DirectoryUnavailableError`` to the
session's policy, which decides how the failure is recorded. Policies are
called concurrently from every worker and must be thread-safe.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .errors import DirectoryUnavailableError, UnavailableReason

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for per-directory error handling policies.

    Subclasses implement different strategies for recording failures that
    occur while listing a directory.
    """

    @abstractmethod
    def handle(self, error: DirectoryUnavailableError) -> None:
        """
        Handle a directory that could not be listed.

        Args:
            error: The classified failure, with ``path`` and ``reason``
        """
        pass


class _RecordingPolicy(ErrorPolicy):
    """Shared bookkeeping for policies that keep failures for inspection."""

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []
        self._lock = threading.Lock()

    def _record(self, error: DirectoryUnavailableError) -> None:
        cause = error.__cause__
        error_record = {
            'path': error.path,
            'reason': error.reason,
            'error': error,
            'error_type': type(cause).__name__ if cause is not None else type(error).__name__,
            'error_message': str(error),
        }
        with self._lock:
            self.errors.append(error_record)
            self.skipped_paths.append(error.path)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        with self._lock:
            errors = list(self.errors)
        return {
            'total_errors': len(errors),
            'not_found': sum(1 for e in errors if e['reason'] is UnavailableReason.NOT_FOUND),
            'access_denied': sum(1 for e in errors if e['reason'] is UnavailableReason.ACCESS_DENIED),
            'other': sum(1 for e in errors if e['reason'] is UnavailableReason.OTHER),
            'skipped_paths': len(errors),
            'errors': errors,
        }


class ContinueOnErrorsPolicy(_RecordingPolicy):
    """
    Policy that logs failures and continues the walk.

    This is the default. Failures are collected for later inspection and
    logged at WARNING when verbose, DEBUG otherwise.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log failures at WARNING level
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: DirectoryUnavailableError) -> None:
        self._record(error)

        level = logging.WARNING if self.verbose else logging.DEBUG
        if error.reason is UnavailableReason.ACCESS_DENIED:
            logger.log(level, "Skipping inaccessible directory '%s': %s", error.path, error)
        else:
            logger.log(level, "Skipping directory '%s': %s", error.path, error)


class CollectErrorsPolicy(_RecordingPolicy):
    """
    Policy that collects all failures without logging, for batch processing.

    Useful for collecting every failure and presenting them at the end.
    """

    def handle(self, error: DirectoryUnavailableError) -> None:
        self._record(error)
