"""Indexing functionality for quillmind."""

from .service import IndexingService, IndexResult

__all__ = [
    "IndexingService",
    "IndexResult",
]
