"""
Ingestion layer: the streaming catalog feed, the synchronizer that mirrors
it locally, and the per-title Steam metadata extractors.
"""
