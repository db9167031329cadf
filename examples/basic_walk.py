#!/usr/bin/env python3
"""
Basic parallel walk example showing the streaming API of FastWalkLib.

This example demonstrates:
- Streaming entries while the workers are still running
- Pattern and depth filtering
- Reading the walk's statistics and skipped directories
"""

import sys
import time
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastwalklib.sync import CollectErrorsPolicy, enumerate_entries


def main():
    """Demonstrate a parallel walk with a pattern."""
    # Get the root path and pattern from command line or use defaults
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    pattern = sys.argv[2] if len(sys.argv) > 2 else "*"

    print(f"Walking: {root_path} (pattern {pattern!r})")
    print("-" * 50)

    policy = CollectErrorsPolicy()
    total_size = 0
    largest = []

    start = time.perf_counter()
    with enumerate_entries(root_path, pattern, max_depth=5, error_policy=policy) as entries:
        for entry in entries:
            total_size += entry.size
            # Track files larger than 1MB
            if entry.size > 1_000_000:
                largest.append(entry)
        stats = entries.stats.snapshot()
    elapsed = time.perf_counter() - start

    # Print summary
    print(f"\nWalk Summary ({elapsed:.2f}s):")
    print(f"  Directories listed: {stats['directories_listed']:,}")
    print(f"  Files matched: {stats['entries_emitted']:,}")
    print(f"  Total Size: {total_size / 1024 / 1024:.1f} MB")

    if largest:
        print(f"\nLarge Files (>1MB):")
        largest.sort(key=lambda entry: entry.size, reverse=True)
        for entry in largest[:5]:
            print(f"  {entry.size / 1024 / 1024:.1f} MB: {entry.full_path}")

    errors = policy.get_statistics()
    if errors['total_errors']:
        print(f"\nSkipped {errors['total_errors']} directories "
              f"({errors['access_denied']} access denied)")


if __name__ == "__main__":
    print("FastWalkLib - Basic Parallel Walk Example")
    print("=" * 50)
    main()
