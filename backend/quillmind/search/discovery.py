"""Finding the files an edit request should touch."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

from ..core import CandidateFile, Embedder
from ..storage import FileStore, VectorStore
from .base import FileDiscovery
from .retrieval import fetch_matched_files, query_project

logger = logging.getLogger(__name__)

SOURCE_CONTEXT = "context"
SOURCE_RAG = "rag"
SOURCE_FALLBACK = "fallback"


class DefaultFileDiscovery(FileDiscovery):

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        file_store: FileStore,
        top_k: int = 10,
        fallback_limit: int = 5,
        listing_limit: int = 20,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.file_store = file_store
        self.top_k = top_k
        self.fallback_limit = fallback_limit
        self.listing_limit = listing_limit

    async def _from_context(self, context_files: Sequence[Dict[str, Any]], project_id: Any) -> List[CandidateFile]:
        found: List[CandidateFile] = []
        for item in context_files:
            name = item.get("fileName") if isinstance(item, dict) else None
            if not name:
                continue
            try:
                row = await self.file_store.find_by_name(project_id, name)
            except Exception as e:
                logger.warning(f"Could not look up context file {name}: {e}")
                continue
            if row is None:
                logger.info(f"Context file {name} not found in project {project_id}")
                continue
            found.append(CandidateFile.from_stored(row, SOURCE_CONTEXT))
        return found

    async def _fallback(self, project_id: Any) -> List[CandidateFile]:
        rows = await self.file_store.list_project_files(project_id, limit=self.listing_limit)
        logger.info(f"Fallback listing found {len(rows)} file(s) in project {project_id}")
        return [CandidateFile.from_stored(r, SOURCE_FALLBACK) for r in rows[: self.fallback_limit]]

    async def _from_rag(self, edit_request: str, project_id: Any) -> List[CandidateFile]:
        try:
            matches = await query_project(self.embedder, self.vector_store, edit_request, project_id, self.top_k)
            if not matches:
                logger.info(f"No indexed matches for project {project_id}, using fallback listing")
                return await self._fallback(project_id)
            rows = await fetch_matched_files(self.file_store, matches)
            return [CandidateFile.from_stored(r, SOURCE_RAG) for r in rows]
        except Exception as e:
            logger.error(f"RAG discovery failed for project {project_id}: {e}")
            try:
                rows = await self.file_store.list_project_files(project_id, limit=self.fallback_limit)
            except Exception as fallback_error:
                logger.error(f"Fallback listing failed for project {project_id}: {fallback_error}")
                return []
            logger.info(f"Emergency fallback found {len(rows)} file(s)")
            return [CandidateFile.from_stored(r, SOURCE_FALLBACK) for r in rows]

    async def discover(
        self,
        edit_request: str,
        context_files: Optional[Sequence[Dict[str, Any]]],
        project_id: Any,
    ) -> List[CandidateFile]:
        files: List[CandidateFile] = []
        names: Set[str] = set()

        candidates = []
        if context_files:
            candidates.extend(await self._from_context(context_files, project_id))
        candidates.extend(await self._from_rag(edit_request, project_id))

        for candidate in candidates:
            if candidate.name in names:
                continue
            files.append(candidate)
            names.add(candidate.name)

        logger.info(f"Discovered {len(files)} file(s): {', '.join(f.name for f in files)}")
        return files


async def discover_files(
    edit_request: str,
    context_files: Optional[Sequence[Dict[str, Any]]],
    project_id: Any,
    embedder: Embedder,
    vector_store: VectorStore,
    file_store: FileStore,
    cfg: Optional[Dict] = None,
) -> List[CandidateFile]:
    retrieval_cfg = (cfg or {}).get("retrieval", {})
    discovery = DefaultFileDiscovery(
        embedder,
        vector_store,
        file_store,
        top_k=retrieval_cfg.get("discovery_top_k", 10),
        fallback_limit=retrieval_cfg.get("fallback_limit", 5),
        listing_limit=retrieval_cfg.get("fallback_listing_limit", 20),
    )
    return await discovery.discover(edit_request, context_files, project_id)
