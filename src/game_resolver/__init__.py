"""
Game Resolver.

Resolves free-text, misspelled or abbreviated game titles to canonical
Steam catalog entries, backed by a periodically synced local mirror of
the Steam app listing.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
