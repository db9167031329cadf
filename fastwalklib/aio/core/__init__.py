"""Core components of the asyncio walker.

Worker tasks share an ``AsyncFrontier`` and publish into an
``AsyncResultChannel``; ``AsyncParallelWalker`` ties them together.
"""

from .lister import AsyncLister, ThreadedLister
from .frontier import AsyncFrontier
from .channel import AsyncResultChannel
from .walker import AsyncParallelWalker, AsyncEntryStream

__all__ = [
    'AsyncLister',
    'ThreadedLister',
    'AsyncFrontier',
    'AsyncResultChannel',
    'AsyncParallelWalker',
    'AsyncEntryStream',
]
