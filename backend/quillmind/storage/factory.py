"""Factory for creating the vector store used by the pipeline."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..errors import ConfigurationError
from .base import VectorStore
from .memory import InMemoryVectorStore, snapshot_loader
from .qdrant import make_qdrant_store
from .resilient import CircuitBreaker, ResilientVectorStore

logger = logging.getLogger(__name__)


def make_fallback_store(cfg: Dict) -> InMemoryVectorStore:
    snapshot_path = cfg.get("vector_store", {}).get("snapshot_path")
    seed = snapshot_loader(snapshot_path) if snapshot_path else None
    return InMemoryVectorStore(seed=seed)


def create_vector_store(cfg: Dict, fallback: Optional[InMemoryVectorStore] = None) -> VectorStore:
    """Build the store once per process.

    With ``vector_store.backend == "qdrant"`` the durable store is wrapped with
    failover to ``fallback``; with ``"memory"`` the fallback is used alone.
    """
    vs_cfg = cfg.get("vector_store", {})
    backend = str(vs_cfg.get("backend", "qdrant")).strip().lower()
    fallback = fallback or make_fallback_store(cfg)

    if backend == "memory":
        logger.info("Using in-memory vector store")
        return fallback

    if backend != "qdrant":
        raise ConfigurationError(f"Invalid vector_store.backend: {backend!r}")

    logger.info("Qdrant vector store configured, with fallback to in-memory store")
    return ResilientVectorStore(
        durable=make_qdrant_store(cfg),
        fallback=fallback,
        breaker=CircuitBreaker(threshold=int(vs_cfg.get("failure_threshold", 3))),
    )
