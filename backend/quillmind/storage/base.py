"""Abstract vector storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..core.models import EmbeddingRecord, SimilarityMatch


class VectorStore(ABC):
    """Abstract base class for vector storage backends.

    All operations are idempotent: upserting the same record id twice leaves
    one record, deleting an unknown id is a no-op.
    """

    name = "vector-store"

    @abstractmethod
    async def upsert(self, records: List[EmbeddingRecord]) -> None:
        """Insert or replace records by id."""
        pass

    @abstractmethod
    async def delete(self, ids: List[str]) -> int:
        """Delete records by id. Returns how many ids were requested or removed."""
        pass

    @abstractmethod
    async def query(
        self,
        query_vector: Sequence[float],
        top_k: int,
        project_id: Optional[object] = None,
    ) -> List[SimilarityMatch]:
        """Return at most ``top_k`` matches for ``project_id`` by descending score."""
        pass
