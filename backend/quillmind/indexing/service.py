"""Keeping the vector store in step with project files."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, List

from ..core import Embedder, EmbeddingRecord, StoredFile, record_id_for_file
from ..core.embeddings import DOCUMENT
from ..errors import UpstreamServiceError
from ..storage import FileStore, VectorStore

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class IndexResult:
    success: bool
    message: str
    indexed: int = 0

    def to_dict(self):
        return dataclasses.asdict(self)


def _indexable(row: StoredFile) -> bool:
    return row.type == "file" and bool(row.content and row.content.strip())


class IndexingService:
    """One embedding record per file, keyed ``file-<id>`` so re-indexing overwrites."""

    def __init__(self, embedder: Embedder, vector_store: VectorStore, file_store: FileStore):
        self.embedder = embedder
        self.vector_store = vector_store
        self.file_store = file_store

    async def _embed(self, row: StoredFile, project_id: Any) -> EmbeddingRecord:
        values = await self.embedder.aembed_one(row.content, task=DOCUMENT)
        return EmbeddingRecord.for_file(project_id, row.file_id, row.name, values)

    async def index_project(self, project_id: Any) -> IndexResult:
        logger.info(f"Starting indexing for project {project_id}")
        rows = await self.file_store.list_project_files(project_id)
        if not rows:
            logger.info(f"No files found for project {project_id}")
            return IndexResult(success=True, message="No files to index.")

        records: List[EmbeddingRecord] = []
        for row in rows:
            if not _indexable(row):
                continue
            try:
                records.append(await self._embed(row, project_id))
            except UpstreamServiceError as e:
                logger.error(f"Failed to embed file {row.file_id} ({row.name}): {e.message}")

        if not records:
            logger.info(f"No content to index for project {project_id}")
            return IndexResult(success=True, message="No content to index.")

        await self.vector_store.upsert(records)
        logger.info(f"Indexed {len(records)} file(s) for project {project_id}")
        return IndexResult(success=True, message=f"Indexed {len(records)} files.", indexed=len(records))

    async def index_file(self, file_id: Any) -> IndexResult:
        row = await self.file_store.get_by_id(file_id)
        if row is None or row.type != "file":
            logger.info(f"File {file_id} not found or not a file, nothing to index")
            return IndexResult(success=True, message="File not found or not indexable.")
        if not _indexable(row):
            logger.info(f"File {file_id} has no content, nothing to index")
            return IndexResult(success=True, message="File has no content to index.")

        try:
            record = await self._embed(row, row.project_id)
        except UpstreamServiceError as e:
            logger.error(f"Failed to embed file {file_id} ({row.name}): {e.message}")
            return IndexResult(success=False, message="Failed to index file.")

        await self.vector_store.upsert([record])
        logger.info(f"Indexed file {file_id} ({row.name})")
        return IndexResult(success=True, message=f"Indexed file {row.name}.", indexed=1)

    async def remove_file(self, file_id: Any) -> IndexResult:
        removed = await self.vector_store.delete([record_id_for_file(file_id)])
        logger.info(f"Removed file {file_id} from index ({removed} record(s))")
        return IndexResult(success=True, message="Removed file from index.")
