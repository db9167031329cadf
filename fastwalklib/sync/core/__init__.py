"""Core components of the thread-based walker.

Each piece of shared state is its own small thread-safe primitive; the
walker only composes them.
"""

from .lister import Lister
from .frontier import Frontier
from .channel import ChannelClosed, CompletionDetector, ResultChannel
from .walker import EntryStream, ParallelWalker

__all__ = [
    # Lister
    'Lister',
    # Shared state
    'Frontier',
    'ResultChannel',
    'ChannelClosed',
    'CompletionDetector',
    # Session
    'ParallelWalker',
    'EntryStream',
]
