"""Read-only access to the project file store."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.models import StoredFile
from ..web.models import File


class FileStore(ABC):
    """Lookups used by discovery, retrieval and indexing. Never writes."""

    @abstractmethod
    async def find_by_name(self, project_id, name: str) -> Optional[StoredFile]:
        pass

    @abstractmethod
    async def get_by_ids(self, file_ids: Sequence) -> List[StoredFile]:
        pass

    @abstractmethod
    async def get_by_id(self, file_id) -> Optional[StoredFile]:
        pass

    @abstractmethod
    async def list_project_files(self, project_id, limit: Optional[int] = None) -> List[StoredFile]:
        """Files (not folders) of a project ordered by name."""
        pass


def _to_stored(row: File) -> StoredFile:
    return StoredFile(
        file_id=row.file_id,
        project_id=row.project_id,
        name=row.name,
        content=row.content,
        type=row.type,
    )


class SqlFileStore(FileStore):
    """SQLAlchemy-backed file store. Blocking queries run in a worker thread."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _run(self, fn):
        db = self.session_factory()
        try:
            return fn(db)
        finally:
            db.close()

    async def find_by_name(self, project_id, name: str) -> Optional[StoredFile]:
        def q(db: Session):
            row = (
                db.query(File)
                .filter(File.project_id == project_id, File.name == name, File.type == "file")
                .first()
            )
            return _to_stored(row) if row else None

        return await asyncio.to_thread(self._run, q)

    async def get_by_ids(self, file_ids: Sequence) -> List[StoredFile]:
        if not file_ids:
            return []

        def q(db: Session):
            rows = db.query(File).filter(File.file_id.in_(list(file_ids))).all()
            # ids from vector metadata may arrive as strings
            by_id = {str(row.file_id): row for row in rows}
            # keep the caller's (ranking) order
            return [_to_stored(by_id[str(i)]) for i in file_ids if str(i) in by_id]

        return await asyncio.to_thread(self._run, q)

    async def get_by_id(self, file_id) -> Optional[StoredFile]:
        def q(db: Session):
            row = db.query(File).filter(File.file_id == file_id).first()
            return _to_stored(row) if row else None

        return await asyncio.to_thread(self._run, q)

    async def list_project_files(self, project_id, limit: Optional[int] = None) -> List[StoredFile]:
        def q(db: Session):
            query = (
                db.query(File)
                .filter(File.project_id == project_id, File.type == "file")
                .order_by(File.name.asc())
            )
            if limit is not None:
                query = query.limit(limit)
            return [_to_stored(row) for row in query.all()]

        return await asyncio.to_thread(self._run, q)
