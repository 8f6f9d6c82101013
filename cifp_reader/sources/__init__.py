"""
Data sources for the cifp_reader library.

Sources fetch CIFP data, cache it on disk and merge what they read into a
``CifpModel``.
"""

from .base import SourceInterface
from .cached import CachedSource
from .cifp import CifpSource

__all__ = [
    'SourceInterface',
    'CachedSource',
    'CifpSource',
]
