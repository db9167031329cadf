"""Testing utilities for FastWalkLib consumers."""

from .fixtures import (
    InMemoryLister,
    Link,
    build_tree_on_disk,
    expected_entries,
    random_tree,
)

__all__ = [
    'InMemoryLister',
    'Link',
    'build_tree_on_disk',
    'expected_entries',
    'random_tree',
]
