"""In-process vector store used when the durable backend is unavailable."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..core.models import EmbeddingRecord, SimilarityMatch
from ..core.similarity import rank_records
from .base import VectorStore

logger = logging.getLogger(__name__)

SeedLoader = Callable[[], Iterable[EmbeddingRecord]]


class InMemoryVectorStore(VectorStore):
    """Mutable record set shared by every request of one running process.

    Create one instance at startup and inject it; the records live as long as
    the instance does. ``seed`` is called once, on first use.
    """

    name = "memory"

    def __init__(self, seed: Optional[SeedLoader] = None):
        self._records: Dict[str, EmbeddingRecord] = {}
        self._lock = threading.Lock()
        self._seed = seed
        self._initialized = False

    def _ensure_initialized(self) -> None:
        # caller holds the lock
        if self._initialized:
            return
        self._initialized = True
        if self._seed is None:
            return
        try:
            seeded = list(self._seed())
        except Exception as e:
            logger.warning(f"Could not seed in-memory vector store: {e}")
            return
        for record in seeded:
            self._records[record.id] = record
        logger.info(f"Seeded in-memory vector store with {len(seeded)} records")

    def _dimension(self) -> Optional[int]:
        for record in self._records.values():
            return len(record.values)
        return None

    async def upsert(self, records: List[EmbeddingRecord]) -> None:
        if not records:
            return
        with self._lock:
            self._ensure_initialized()
            vector_dim = self._dimension() or len(records[0].values)
            for i, record in enumerate(records):
                if len(record.values) != vector_dim:
                    raise ValueError(
                        f"Record {i} ({record.id}) has dimension {len(record.values)}, "
                        f"expected {vector_dim}"
                    )
            for record in records:
                if record.id in self._records:
                    logger.debug(f"Updating existing embedding: {record.id}")
                self._records[record.id] = record
            total = len(self._records)
        logger.info(f"Upserted {len(records)} embeddings. Total store size: {total}")

    async def delete(self, ids: List[str]) -> int:
        with self._lock:
            self._ensure_initialized()
            deleted = 0
            for record_id in ids:
                if self._records.pop(record_id, None) is not None:
                    deleted += 1
            total = len(self._records)
        logger.info(f"Deleted {deleted} embeddings. Total store size: {total}")
        return deleted

    async def query(
        self,
        query_vector: Sequence[float],
        top_k: int,
        project_id: Optional[object] = None,
    ) -> List[SimilarityMatch]:
        with self._lock:
            self._ensure_initialized()
            snapshot = list(self._records.values())
        matches = rank_records(query_vector, snapshot, top_k, project_id=project_id)
        logger.debug(f"Found {len(matches)} matches in in-memory store (project={project_id})")
        return matches

    def count(self) -> int:
        with self._lock:
            self._ensure_initialized()
            return len(self._records)


def snapshot_loader(path: str | Path) -> SeedLoader:
    """Seed loader reading ``[{"id", "values", "metadata"}, ...]`` from a JSON file."""

    def load() -> List[EmbeddingRecord]:
        p = Path(path)
        if not p.exists():
            logger.info(f"No vector snapshot at {p}, starting empty")
            return []
        data = json.loads(p.read_text(encoding="utf-8"))
        return [
            EmbeddingRecord(id=item["id"], values=item["values"], metadata=item.get("metadata", {}))
            for item in data
        ]

    return load
