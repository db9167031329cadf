"""Shared pytest configuration for FastWalkLib tests."""

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running stress tests (deselect with -m 'not slow')")


@pytest.fixture
def small_tree():
    """The three-file tree most walker tests start from."""
    return {
        'a.txt': 1,
        'b.txt': 2,
        'sub': {'c.txt': 3},
    }
