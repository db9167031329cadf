"""FastWalkLib - Parallel Tree Enumeration Library.

FastWalkLib lists every entry of a directory tree with a pool of workers
sharing one frontier, streaming matching entries to the caller while the
walk is still running.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Threads:
    from fastwalklib.sync import enumerate_entries

Asyncio:
    from fastwalklib.aio import enumerate_entries_async
━━━━━━━━━━━━━━━━━━━━━━━━━━

Both implementations share configuration, records, errors and the
cancellation token; only the worker model differs.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export submodules for convenient access
from . import sync
from . import aio

__all__ = [
    "__version__",
    "sync",
    "aio",
]
