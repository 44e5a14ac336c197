"""Qdrant vector database backend."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Sequence

from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointIdsList, PointStruct, VectorParams

from ..core.models import EmbeddingRecord, SimilarityMatch
from ..core.similarity import same_project
from .base import VectorStore

logger = logging.getLogger(__name__)

RECORD_ID_KEY = "record_id"


def point_id_for(record_id: str) -> str:
    """Qdrant only accepts UUIDs or integers; derive a stable UUID from the record id."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, record_id))


def overfetch_limit(top_k: int) -> int:
    """Qdrant is queried without a project filter, so ask for more than K."""
    return max(top_k * 3, 10)


class QdrantVectorStore(VectorStore):
    """Durable backend. Every call may fail or time out; callers wrap it."""

    name = "qdrant"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6333,
        collection_name: str = "project_embeddings",
        timeout: int = 5,
        client: Optional[QdrantClient] = None,
    ):
        self.host = host
        self.port = port
        self.collection_name = collection_name
        self.client = client or QdrantClient(host=host, port=port, timeout=timeout)
        self._collection_ready = False

    def _get_collection_vector_dim(self) -> Optional[int]:
        if not self.client.collection_exists(collection_name=self.collection_name):
            return None
        collection_info = self.client.get_collection(collection_name=self.collection_name)
        return collection_info.config.params.vectors.size

    def _ensure_collection(self, vector_dim: int) -> None:
        if self._collection_ready:
            return
        existing_dim = self._get_collection_vector_dim()
        if existing_dim is None:
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(size=vector_dim, distance=Distance.COSINE),
            )
            logger.info(f"Created collection '{self.collection_name}' (dim={vector_dim})")
        elif existing_dim != vector_dim:
            raise ValueError(
                f"Collection '{self.collection_name}' exists with dimension {existing_dim}, "
                f"but records have dimension {vector_dim}. Please delete the collection and re-index."
            )
        self._collection_ready = True

    def _upsert_sync(self, records: List[EmbeddingRecord]) -> None:
        vector_dim = len(records[0].values)
        for i, record in enumerate(records):
            if len(record.values) != vector_dim:
                raise ValueError(
                    f"Record {i} ({record.id}) has different dimension: "
                    f"{len(record.values)} vs expected {vector_dim}"
                )
        self._ensure_collection(vector_dim)

        points = [
            PointStruct(
                id=point_id_for(record.id),
                vector=list(record.values),
                payload={**record.metadata, RECORD_ID_KEY: record.id},
            )
            for record in records
        ]

        batch_size = 100
        total_batches = (len(points) + batch_size - 1) // batch_size
        for i in range(0, len(points), batch_size):
            batch = points[i:i + batch_size]
            batch_num = i // batch_size + 1
            try:
                self.client.upsert(collection_name=self.collection_name, points=batch)
            except Exception as e:
                raise RuntimeError(
                    f"Failed to upsert batch {batch_num}/{total_batches} "
                    f"(points {i}-{i + len(batch)}): {e}"
                ) from e
        logger.info(f"Saved {len(points)} records to collection '{self.collection_name}'")

    async def upsert(self, records: List[EmbeddingRecord]) -> None:
        if not records:
            logger.warning("No records to save")
            return
        await asyncio.to_thread(self._upsert_sync, records)

    def _delete_sync(self, ids: List[str]) -> int:
        if not self.client.collection_exists(collection_name=self.collection_name):
            return 0
        self.client.delete(
            collection_name=self.collection_name,
            points_selector=PointIdsList(points=[point_id_for(i) for i in ids]),
        )
        logger.info(f"Deleted {len(ids)} records from collection '{self.collection_name}'")
        return len(ids)

    async def delete(self, ids: List[str]) -> int:
        if not ids:
            return 0
        return await asyncio.to_thread(self._delete_sync, ids)

    def _query_sync(self, query_vector: Sequence[float], limit: int) -> List[SimilarityMatch]:
        if not self.client.collection_exists(collection_name=self.collection_name):
            return []
        results = self.client.query_points(
            collection_name=self.collection_name,
            query=list(query_vector),
            limit=limit,
            with_payload=True,
            with_vectors=False,
        )
        hits = []
        for point in results.points:
            payload: Dict = dict(point.payload or {})
            record_id = payload.pop(RECORD_ID_KEY, str(point.id))
            hits.append(SimilarityMatch(id=record_id, score=point.score, metadata=payload))
        return hits

    async def query(
        self,
        query_vector: Sequence[float],
        top_k: int,
        project_id: Optional[object] = None,
    ) -> List[SimilarityMatch]:
        limit = overfetch_limit(top_k) if project_id is not None else top_k
        hits = await asyncio.to_thread(self._query_sync, query_vector, limit)
        if project_id is not None:
            hits = [h for h in hits if same_project(h.metadata, project_id)]
            logger.debug(f"Filtered Qdrant results to {len(hits)} matches for project {project_id}")
        return hits[:top_k]


def make_qdrant_store(cfg: Dict) -> QdrantVectorStore:
    qdrant_cfg = cfg.get("vector_store", {}).get("qdrant", {})
    return QdrantVectorStore(
        host=qdrant_cfg.get("host", "localhost"),
        port=qdrant_cfg.get("port", 6333),
        collection_name=qdrant_cfg.get("collection", "project_embeddings"),
        timeout=qdrant_cfg.get("timeout", 5),
    )
