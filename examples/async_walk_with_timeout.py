#!/usr/bin/env python3
"""
Async walk with a timeout built from a cancellation token.

This example demonstrates:
- Draining an AsyncEntryStream with ``async for``
- Composing a timeout with ``CancellationToken.cancel_after``
- Telling a cancelled walk apart from a finished one
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastwalklib.aio import ResultFilter, enumerate_entries_async
from fastwalklib.sync import CancellationToken, WalkCancelledError


async def main():
    """Count entries until the walk finishes or the timeout fires."""
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    seconds = float(sys.argv[2]) if len(sys.argv) > 2 else 2.0

    token = CancellationToken()
    token.cancel_after(seconds)

    files = 0
    directories = 0
    try:
        async with enumerate_entries_async(root_path, result_filter=ResultFilter.BOTH,
                                           cancellation=token) as entries:
            async for entry in entries:
                if entry.is_directory:
                    directories += 1
                else:
                    files += 1
        print(f"Finished: {files:,} files, {directories:,} directories")
    except WalkCancelledError:
        print(f"Timed out after {seconds}s: {files:,} files, {directories:,} directories so far")


if __name__ == "__main__":
    print("FastWalkLib - Async Walk With Timeout")
    print("=" * 50)
    asyncio.run(main())
