"""Asyncio parallel walker.

The same session model as ``fastwalklib.sync.core.walker`` with worker
tasks instead of threads. Tasks share one event loop, so the frontier and
channel need no locks; blocking listers run off-loop through
``ThreadedLister``.
"""

import asyncio
import logging
from typing import AsyncIterator, List, Optional

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
from ...sync.core.channel import ChannelClosed, CompletionDetector
from .channel import AsyncResultChannel
from .frontier import AsyncFrontier
from .lister import AsyncLister

logger = logging.getLogger(__name__)


class AsyncParallelWalker:
    """One single-use asyncio walk session over a tree.

    Cancellation tokens may be cancelled from any thread; the session
    forwards the signal to its loop with ``call_soon_threadsafe``.
    """

    def __init__(
        self,
        root: str,
        lister: AsyncLister,
        config: Optional[WalkConfig] = None,
        cancellation: Optional[CancellationToken] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """Initialize walk session.

        Args:
            root: Directory to walk
            lister: Async capability listing one directory
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
        self._frontier = AsyncFrontier(self.config.frontier_order)
        if self.config.dedup is DedupPolicy.DIRECTORIES:
            self._guard = DedupGuard()
        else:
            self._guard = NullGuard()
        self._channel = AsyncResultChannel(self.config.channel_capacity)
        self._classifier = ChildClassifier(self.config, lister.join)
        self._completion: Optional[CompletionDetector] = None
        self._tasks: List[asyncio.Task] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._fault: Optional[BaseException] = None
        self._started = False

    def start(self) -> 'AsyncEntryStream':
        """Seed the frontier, create the worker tasks and return the stream.

        Must be called with a running event loop.

        Raises:
            RuntimeError: If the session was already started or no loop runs
        """
        if self._started:
            raise RuntimeError("walk sessions are single-use; create a new one")
        self._loop = asyncio.get_running_loop()
        self._started = True

        workers = self.config.effective_parallelism
        logger.debug("Starting async walk of %s with %d workers", self.root, workers)

        self._frontier.push(WorkItem(self.root, 0))
        self._completion = CompletionDetector(workers, self._on_all_retired)
        self._token.register(self._schedule_cancel)

        for index in range(workers):
            self._tasks.append(self._loop.create_task(
                self._work(index), name=f"fastwalk-worker-{index}"
            ))

        return AsyncEntryStream(self)

    def cancel(self) -> None:
        """Stop the walk. The caller's token is left untouched."""
        self._token.cancel()

    @property
    def cancellation(self) -> CancellationToken:
        return self._token

    @property
    def channel(self) -> AsyncResultChannel:
        return self._channel

    @property
    def frontier(self) -> AsyncFrontier:
        return self._frontier

    @property
    def tasks(self) -> List[asyncio.Task]:
        return list(self._tasks)

    # Worker loop

    async def _work(self, index: int) -> None:
        try:
            while not self._token.is_cancelled:
                item = self._frontier.try_pop()
                if item is None:
                    if self._frontier.is_exhausted():
                        break
                    await self._frontier.wait_for_work(self.config.poll_interval)
                    continue

                try:
                    await self._expand(item)
                finally:
                    self._frontier.task_done()
        except asyncio.CancelledError:
            # A cancelled task leaves work behind: the walk must not close COMPLETED.
            self._token.cancel()
            raise
        except Exception as exc:
            self._fail(exc)
        finally:
            logger.debug("fastwalk-worker-%d retired", index)
            self._completion.retire()

    async def _expand(self, item: WorkItem) -> None:
        if not self.config.should_expand(item.depth):
            self.stats.increment('depth_skipped')
            return

        if not self._guard.claim(self.lister.canonical_path(item.path)):
            self.stats.increment('duplicates_skipped')
            return

        try:
            children = list(await self.lister.list_children(item.path, self._token))
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
            if dispatch.entry is not None and await self._channel.put(dispatch.entry):
                self.stats.increment('entries_emitted')

    def _report(self, error: DirectoryUnavailableError) -> None:
        self.stats.increment('directories_failed')
        self.error_policy.handle(error)

    # Termination

    def _fail(self, exc: BaseException) -> None:
        logger.error("Worker fault while walking %s: %r", self.root, exc)
        if self._fault is None:
            self._fault = exc
        self._token.cancel()

    def _schedule_cancel(self) -> None:
        """Token callback; may run on any thread."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._on_cancel()
            return

        try:
            self._loop.call_soon_threadsafe(self._on_cancel)
        except RuntimeError:
            # Loop already closed: nothing left to stop.
            logger.debug("Cancellation of %s arrived after its loop closed", self.root)

    def _on_cancel(self) -> None:
        self._frontier.abandon()
        self._close_channel()

    def _on_all_retired(self) -> None:
        self._close_channel()
        if self._parent_token is not None:
            self._parent_token.unregister(self._token.cancel)
        logger.debug("Async walk of %s finished (%s): %s",
                     self.root, self._channel.outcome.value, self.stats.snapshot())

    def _close_channel(self) -> None:
        if self._fault is not None:
            self._channel.close(WalkOutcome.FAILED, self._fault)
        elif self._token.is_cancelled:
            self._channel.close(WalkOutcome.CANCELLED)
        else:
            self._channel.close(WalkOutcome.COMPLETED)

    async def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for every worker task to finish.

        Returns:
            True if all workers have finished
        """
        if not self._tasks:
            return True
        _, pending = await asyncio.wait(self._tasks, timeout=timeout)
        return not pending


class AsyncEntryStream(AsyncIterator[Entry]):
    """Async counterpart of ``EntryStream``.

    Use with ``async for``. ``aclose`` (or leaving an ``async with`` block)
    stops the walk quietly and waits for the workers.
    """

    def __init__(self, walker: AsyncParallelWalker):
        self._walker = walker
        self._finished = False
        self._closed_by_consumer = False

    def __aiter__(self) -> 'AsyncEntryStream':
        return self

    async def __anext__(self) -> Entry:
        if self._finished:
            raise StopAsyncIteration

        try:
            return await self._walker.channel.get()
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
            raise StopAsyncIteration from None

    def cancel(self) -> None:
        """Cancel the walk; the next drain reports the cancellation."""
        self._walker.cancel()

    async def aclose(self) -> None:
        """Stop consuming: cancel the walk and wait for the workers."""
        if not self._finished:
            self._closed_by_consumer = True
            self._finished = True
            self._walker.cancel()
        await self._walker.join()

    async def join(self, timeout: Optional[float] = None) -> bool:
        return await self._walker.join(timeout)

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

    async def __aenter__(self) -> 'AsyncEntryStream':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def __del__(self):
        if not self._finished:
            self._walker.cancel()

    def __repr__(self) -> str:
        return f"AsyncEntryStream(root={self._walker.root!r}, outcome={self.outcome.value})"
