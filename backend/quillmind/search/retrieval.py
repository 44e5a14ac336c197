"""Semantic lookup of project files."""

from __future__ import annotations

import logging
from typing import Any, List

from ..core import Embedder, SimilarityMatch, StoredFile, same_project
from ..core.embeddings import QUERY
from ..storage import FileStore, VectorStore

logger = logging.getLogger(__name__)


async def query_project(
    embedder: Embedder,
    store: VectorStore,
    text: str,
    project_id: Any,
    top_k: int,
) -> List[SimilarityMatch]:
    """Embed ``text`` and return the project's best matches.

    Embedding errors propagate; store errors are handled by the store.
    """
    vector = await embedder.aembed_one(text, task=QUERY)
    matches = await store.query(vector, top_k, project_id=project_id)
    scoped = [m for m in matches if same_project(m.metadata, project_id)]
    logger.info(f"Vector search returned {len(matches)} match(es), {len(scoped)} in project {project_id}")
    return scoped


async def fetch_matched_files(file_store: FileStore, matches: List[SimilarityMatch]) -> List[StoredFile]:
    file_ids = [m.metadata.get("fileId") for m in matches if m.metadata.get("fileId") is not None]
    rows = await file_store.get_by_ids(file_ids)
    if rows:
        logger.info(f"Matched files: {', '.join(r.name for r in rows)}")
    return rows


async def retrieve_relevant_files(
    embedder: Embedder,
    store: VectorStore,
    file_store: FileStore,
    text: str,
    project_id: Any,
    top_k: int,
) -> List[StoredFile]:
    matches = await query_project(embedder, store, text, project_id, top_k)
    if not matches:
        return []
    return await fetch_matched_files(file_store, matches)
