"""
Local Steam catalog.

Persisted ``(id, name, last_updated)`` entries and sync bookkeeping,
written by the synchronizer and read by the resolver.
"""

from game_resolver.catalog.models import CatalogEntry, SyncMetadata
from game_resolver.catalog.store import CatalogStore, StoreError, escape_like

__all__ = [
    "CatalogEntry",
    "CatalogStore",
    "StoreError",
    "SyncMetadata",
    "escape_like",
]
