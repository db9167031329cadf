"""Thread-based parallel walker.

A walk session seeds the frontier with the root, starts a fixed pool of
worker threads and hands the consumer an ``EntryStream`` right away. Workers
pop directories from the shared frontier, list them through the Lister,
push subdirectories back and publish matching entries into the result
channel. The last worker to retire closes the channel.
"""

import logging
import threading
import time
from typing import Iterator, List, Optional

from ..._common import (
    CancellationToken,
    ChildClassifier,
    ContinueOnErrorsPolicy,
    DedupGuard,
    DedupPolicy,
    DirectoryUnavailableError,
    Entry,
    ErrorPolicy,
    NullGuard,
    WalkCancelledError,
    WalkConfig,
    WalkerFaultError,
    WalkOutcome,
    WalkStats,
    WorkItem,
    validate_root,
)
from .channel import ChannelClosed, CompletionDetector, ResultChannel
from .frontier import Frontier
from .lister import Lister

logger = logging.getLogger(__name__)


class ParallelWalker:
    """One single-use walk session over a tree.

    Owns the four pieces of shared state (frontier, dedup guard, result
    channel, completion detector) plus the session's stats and error policy.
    Construct it, call ``start`` once, drain the returned stream.
    """

    def __init__(
        self,
        root: str,
        lister: Lister,
        config: Optional[WalkConfig] = None,
        cancellation: Optional[CancellationToken] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """Initialize walk session.

        Args:
            root: Directory to walk
            lister: Capability listing one directory
            config: Walk configuration (defaults to WalkConfig())
            cancellation: Caller's token; cancelling it stops the walk
            error_policy: Receives per-directory failures
        """
        self.config = config or WalkConfig()
        self.lister = lister
        self.root = lister.normalize_root(validate_root(root))
        self.error_policy = error_policy or ContinueOnErrorsPolicy(verbose=False)
        self.stats = WalkStats()

        self._parent_token = cancellation
        self._token = CancellationToken.linked(cancellation)
        self._frontier = Frontier(self.config.frontier_order)
        if self.config.dedup is DedupPolicy.DIRECTORIES:
            self._guard = DedupGuard()
        else:
            self._guard = NullGuard()
        self._channel = ResultChannel(self.config.channel_capacity)
        self._classifier = ChildClassifier(self.config, lister.join)
        self._completion: Optional[CompletionDetector] = None
        self._threads: List[threading.Thread] = []
        self._fault: Optional[BaseException] = None
        self._state_lock = threading.Lock()
        self._started = False

    def start(self) -> 'EntryStream':
        """Seed the frontier, start the workers and return the stream.

        Returns immediately; the walk runs while the caller drains.

        Raises:
            RuntimeError: If the session was already started
        """
        with self._state_lock:
            if self._started:
                raise RuntimeError("walk sessions are single-use; create a new one")
            self._started = True

        workers = self.config.effective_parallelism
        logger.debug("Starting walk of %s with %d workers", self.root, workers)

        self._frontier.push(WorkItem(self.root, 0))
        self._completion = CompletionDetector(workers, self._on_all_retired)
        self._token.register(self._on_cancel)

        for index in range(workers):
            thread = threading.Thread(
                target=self._work,
                name=f"fastwalk-worker-{index}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

        return EntryStream(self)

    def cancel(self) -> None:
        """Stop the walk. The caller's token is left untouched."""
        self._token.cancel()

    @property
    def cancellation(self) -> CancellationToken:
        """The session's internal token, linked to the caller's."""
        return self._token

    @property
    def channel(self) -> ResultChannel:
        return self._channel

    @property
    def frontier(self) -> Frontier:
        return self._frontier

    @property
    def guard(self):
        return self._guard

    # Worker loop

    def _work(self) -> None:
        """Worker thread body: Idle -> Expanding -> Dispatching -> Idle."""
        try:
            while not self._token.is_cancelled:
                item = self._frontier.try_pop()
                if item is None:
                    if self._frontier.is_exhausted():
                        break
                    self._frontier.wait_for_work(self.config.poll_interval)
                    continue

                try:
                    self._expand(item)
                finally:
                    self._frontier.task_done()
        except Exception as exc:
            self._fail(exc)
        finally:
            logger.debug("%s retired", threading.current_thread().name)
            self._completion.retire()

    def _expand(self, item: WorkItem) -> None:
        """List one directory and route its children."""
        if not self.config.should_expand(item.depth):
            self.stats.increment('depth_skipped')
            return

        if not self._guard.claim(self.lister.canonical_path(item.path)):
            self.stats.increment('duplicates_skipped')
            return

        try:
            children = list(self.lister.list_children(item.path, self._token))
        except DirectoryUnavailableError as error:
            self._report(error)
            return
        except OSError as error:
            self._report(DirectoryUnavailableError.from_os_error(item.path, error))
            return

        self.stats.increment('directories_listed')

        for child in children:
            if self._token.is_cancelled:
                return

            dispatch = self._classifier.classify(item, child)
            if dispatch.work_item is not None:
                self._frontier.push(dispatch.work_item)
            if dispatch.entry is not None and self._channel.put(dispatch.entry):
                self.stats.increment('entries_emitted')

    def _report(self, error: DirectoryUnavailableError) -> None:
        self.stats.increment('directories_failed')
        self.error_policy.handle(error)

    # Termination

    def _fail(self, exc: BaseException) -> None:
        """Abort the session because a worker hit an unexpected error."""
        logger.error("Worker fault while walking %s: %r", self.root, exc)
        with self._state_lock:
            if self._fault is None:
                self._fault = exc
        self._token.cancel()

    def _on_cancel(self) -> None:
        self._frontier.abandon()
        self._close_channel()

    def _on_all_retired(self) -> None:
        self._close_channel()
        if self._parent_token is not None:
            self._parent_token.unregister(self._token.cancel)
        logger.debug("Walk of %s finished (%s): %s",
                     self.root, self._channel.outcome.value, self.stats.snapshot())

    def _close_channel(self) -> None:
        with self._state_lock:
            fault = self._fault
        if fault is not None:
            self._channel.close(WalkOutcome.FAILED, fault)
        elif self._token.is_cancelled:
            self._channel.close(WalkOutcome.CANCELLED)
        else:
            self._channel.close(WalkOutcome.COMPLETED)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for every worker thread to exit.

        Args:
            timeout: Maximum seconds to wait in total

        Returns:
            True if all workers have exited
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in self._threads:
            if deadline is None:
                thread.join()
            else:
                thread.join(max(0.0, deadline - time.monotonic()))
        return not any(thread.is_alive() for thread in self._threads)


class EntryStream(Iterator[Entry]):
    """Lazy, single-consumer sequence of the entries of one walk.

    Iteration ends cleanly once the tree is exhausted. If the walk was
    cancelled through its token, the next ``next()`` raises
    ``WalkCancelledError`` once (unless ``raise_on_cancel`` is off) and
    iteration then ends. A worker fault surfaces as ``WalkerFaultError``.

    Closing the stream (or leaving its ``with`` block) stops the walk
    without raising.
    """

    def __init__(self, walker: ParallelWalker):
        self._walker = walker
        self._finished = False
        self._closed_by_consumer = False

    def __iter__(self) -> 'EntryStream':
        return self

    def __next__(self) -> Entry:
        if self._finished:
            raise StopIteration

        try:
            return self._walker.channel.get()
        except ChannelClosed as closed:
            self._finished = True
            if closed.outcome is WalkOutcome.FAILED:
                raise WalkerFaultError(
                    f"walk of {self._walker.root} aborted by a worker fault: {closed.error!r}"
                ) from closed.error
            if (closed.outcome is WalkOutcome.CANCELLED
                    and not self._closed_by_consumer
                    and self._walker.config.raise_on_cancel):
                raise WalkCancelledError(f"walk of {self._walker.root} was cancelled") from None
            raise StopIteration from None

    def cancel(self) -> None:
        """Cancel the walk; the next drain reports the cancellation."""
        self._walker.cancel()

    def close(self) -> None:
        """Stop consuming: cancel the walk and end iteration quietly."""
        if not self._finished:
            self._closed_by_consumer = True
            self._finished = True
            self._walker.cancel()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker threads to exit. See ``ParallelWalker.join``."""
        return self._walker.join(timeout)

    @property
    def outcome(self) -> WalkOutcome:
        return self._walker.channel.outcome

    @property
    def cancelled(self) -> bool:
        return self.outcome is WalkOutcome.CANCELLED

    @property
    def completed(self) -> bool:
        return self.outcome is WalkOutcome.COMPLETED

    @property
    def stats(self) -> WalkStats:
        return self._walker.stats

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._walker.error_policy

    @property
    def root(self) -> str:
        return self._walker.root

    def __enter__(self) -> 'EntryStream':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        if not self._finished:
            self._walker.cancel()

    def __repr__(self) -> str:
        return f"EntryStream(root={self._walker.root!r}, outcome={self.outcome.value})"
