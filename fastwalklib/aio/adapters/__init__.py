"""Async listers for concrete namespaces."""

from .filesystem import AsyncScandirLister

__all__ = [
    'AsyncScandirLister',
]
