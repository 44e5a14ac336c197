"""Shared fakes and fixtures."""

import asyncio
from typing import Callable, Dict, List, Optional, Union

import pytest
from sqlalchemy.orm import sessionmaker

from quillmind.core import Embedder, StoredFile
from quillmind.errors import UpstreamServiceError
from quillmind.prompt_builder import PromptBuilder
from quillmind.storage import FileStore, SqlFileStore, VectorStore
from quillmind.web.database import Base, make_engine
from quillmind.web.models import File, Project


def run(coro):
    return asyncio.run(coro)


class FakeLLM:
    """Scripted completion service.

    ``replies`` is either a list consumed in order or a callable receiving
    ``(prompt, system_prompt)``. An ``Exception`` instance in the list is raised.
    """

    def __init__(self, replies: Union[List, Callable[[str, str], str], None] = None):
        self.replies = replies if replies is not None else []
        self.calls: List[Dict] = []

    async def complete(self, prompt, system_prompt="", json_mode=False, temperature=None, max_tokens=None):
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "json_mode": json_mode,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if callable(self.replies):
            reply = self.replies(prompt, system_prompt)
        else:
            if not self.replies:
                raise AssertionError("FakeLLM ran out of scripted replies")
            reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class KeywordEmbedder(Embedder):
    """Deterministic 3-d vectors: one axis each for ``alpha``, ``beta`` and ``gamma``."""

    AXES = ("alpha", "beta", "gamma")

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[tuple] = []

    def embed(self, texts, task="document"):
        out = []
        for text in texts:
            self.calls.append((text, task))
            if self.fail:
                raise UpstreamServiceError("Failed to generate text embedding.")
            lowered = text.lower()
            out.append([float(lowered.count(axis)) for axis in self.AXES])
        return out


class ListFileStore(FileStore):
    def __init__(self, files: Optional[List[StoredFile]] = None, fail: bool = False):
        self.files = list(files or [])
        self.fail = fail

    def _check(self):
        if self.fail:
            raise RuntimeError("file store unavailable")

    async def find_by_name(self, project_id, name):
        self._check()
        for f in self.files:
            if str(f.project_id) == str(project_id) and f.name == name and f.type == "file":
                return f
        return None

    async def get_by_ids(self, file_ids):
        self._check()
        by_id = {str(f.file_id): f for f in self.files}
        return [by_id[str(i)] for i in file_ids if str(i) in by_id]

    async def get_by_id(self, file_id):
        self._check()
        for f in self.files:
            if str(f.file_id) == str(file_id):
                return f
        return None

    async def list_project_files(self, project_id, limit=None):
        self._check()
        rows = sorted(
            (f for f in self.files if str(f.project_id) == str(project_id) and f.type == "file"),
            key=lambda f: f.name,
        )
        return rows[:limit] if limit is not None else rows


class FailingVectorStore(VectorStore):
    name = "broken"

    def __init__(self):
        self.calls = 0

    async def upsert(self, records):
        self.calls += 1
        raise ConnectionError("durable store down")

    async def delete(self, ids):
        self.calls += 1
        raise ConnectionError("durable store down")

    async def query(self, query_vector, top_k, project_id=None):
        self.calls += 1
        raise ConnectionError("durable store down")


@pytest.fixture
def prompt_builder():
    return PromptBuilder()


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = factory()
    try:
        db.add_all([Project(project_id=1, user_id=1, name="novel"), Project(project_id=2, user_id=1, name="other")])
        db.flush()
        folder = File(file_id=1, project_id=1, name="chapters", type="folder")
        db.add(folder)
        db.flush()
        db.add_all(
            [
                File(file_id=2, project_id=1, parent_id=1, name="b_alpha.md", type="file", content="alpha alpha text here"),
                File(file_id=3, project_id=1, parent_id=1, name="a_beta.md", type="file", content="beta notes for chapter"),
                File(file_id=4, project_id=1, name="empty.md", type="file", content=""),
                File(file_id=5, project_id=2, name="b_alpha.md", type="file", content="alpha in another project"),
            ]
        )
        db.commit()
    finally:
        db.close()
    yield factory
    engine.dispose()


@pytest.fixture
def sql_file_store(session_factory):
    return SqlFileStore(session_factory)
