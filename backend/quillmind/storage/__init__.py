"""Vector storage backends and the read-only file store."""

from .base import VectorStore
from .memory import InMemoryVectorStore, snapshot_loader
from .qdrant import QdrantVectorStore, make_qdrant_store
from .resilient import BreakerState, CircuitBreaker, ResilientVectorStore
from .factory import create_vector_store, make_fallback_store
from .files import FileStore, SqlFileStore

__all__ = [
    "VectorStore",
    "InMemoryVectorStore",
    "snapshot_loader",
    "QdrantVectorStore",
    "make_qdrant_store",
    "BreakerState",
    "CircuitBreaker",
    "ResilientVectorStore",
    "create_vector_store",
    "make_fallback_store",
    "FileStore",
    "SqlFileStore",
]
