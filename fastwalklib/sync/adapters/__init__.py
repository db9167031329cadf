"""Listers for concrete namespaces."""

from .filesystem import ScandirLister

__all__ = ['ScandirLister']
