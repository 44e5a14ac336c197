import pytest

from conftest import FailingVectorStore, KeywordEmbedder, ListFileStore, run
from quillmind.core import EmbeddingRecord, StoredFile
from quillmind.errors import UpstreamServiceError
from quillmind.search import DefaultFileDiscovery, discover_files, retrieve_relevant_files
from quillmind.storage import InMemoryVectorStore, ResilientVectorStore


def _files():
    return [
        StoredFile(file_id=1, project_id=1, name="a.md", content="alpha alpha notes"),
        StoredFile(file_id=2, project_id=1, name="b.md", content="beta chapter draft"),
        StoredFile(file_id=3, project_id=1, name="c.md", content="gamma appendix"),
        StoredFile(file_id=4, project_id=2, name="a.md", content="alpha elsewhere"),
        StoredFile(file_id=5, project_id=1, name="folder", content=None, type="folder"),
    ]


def _indexed_store(embedder, files):
    store = InMemoryVectorStore()
    records = [
        EmbeddingRecord.for_file(f.project_id, f.file_id, f.name, embedder.embed_one(f.content))
        for f in files
        if f.type == "file"
    ]
    run(store.upsert(records))
    return store


class TestDefaultFileDiscovery:

    def test_context_files_win_over_rag_duplicates(self, embedder):
        files = _files()
        discovery = DefaultFileDiscovery(embedder, _indexed_store(embedder, files), ListFileStore(files))

        found = run(discovery.discover("alpha rewrite", [{"fileName": "a.md"}], 1))

        names = [f.name for f in found]
        assert names[0] == "a.md"
        assert found[0].source == "context"
        assert len(names) == len(set(names))
        assert all(f.source == "rag" for f in found[1:])
        assert all(f.file_id in (1, 2, 3) for f in found)

    def test_rag_only_returns_project_files(self, embedder):
        files = _files()
        discovery = DefaultFileDiscovery(embedder, _indexed_store(embedder, files), ListFileStore(files), top_k=1)

        found = run(discovery.discover("alpha rewrite", [], 1))

        assert [(f.file_id, f.source) for f in found] == [(1, "rag")]

    def test_unknown_context_file_is_skipped(self, embedder):
        files = _files()
        discovery = DefaultFileDiscovery(embedder, _indexed_store(embedder, files), ListFileStore(files), top_k=1)

        found = run(discovery.discover("gamma fix", [{"fileName": "missing.md"}, {"nope": 1}], 1))

        assert [f.name for f in found] == ["c.md"]

    def test_unindexed_project_falls_back_to_listing(self, embedder):
        files = [StoredFile(file_id=i, project_id=9, name=f"{chr(ord('a') + i)}.md", content="text") for i in range(7)]
        discovery = DefaultFileDiscovery(embedder, InMemoryVectorStore(), ListFileStore(files))

        found = run(discovery.discover("anything", None, 9))

        assert [f.name for f in found] == ["a.md", "b.md", "c.md", "d.md", "e.md"]
        assert all(f.source == "fallback" for f in found)

    def test_embedding_failure_uses_emergency_fallback(self):
        files = _files()
        discovery = DefaultFileDiscovery(
            KeywordEmbedder(fail=True), InMemoryVectorStore(), ListFileStore(files), fallback_limit=2
        )

        found = run(discovery.discover("alpha", [], 1))

        assert [f.name for f in found] == ["a.md", "b.md"]
        assert all(f.source == "fallback" for f in found)

    def test_everything_failing_returns_nothing(self):
        discovery = DefaultFileDiscovery(
            KeywordEmbedder(fail=True), InMemoryVectorStore(), ListFileStore(_files(), fail=True)
        )
        assert run(discovery.discover("alpha", [{"fileName": "a.md"}], 1)) == []

    def test_store_outage_is_invisible(self, embedder):
        files = _files()
        store = ResilientVectorStore(FailingVectorStore(), _indexed_store(embedder, files))
        discovery = DefaultFileDiscovery(embedder, store, ListFileStore(files), top_k=1)

        found = run(discovery.discover("beta edits", [], "1"))

        assert [(f.name, f.source) for f in found] == [("b.md", "rag")]


def test_discover_files_reads_limits_from_config(embedder):
    files = [StoredFile(file_id=i, project_id=1, name=f"f{i}.md", content="text") for i in range(10)]
    cfg = {"retrieval": {"fallback_limit": 3, "fallback_listing_limit": 20}}

    found = run(discover_files("edit", None, 1, embedder, InMemoryVectorStore(), ListFileStore(files), cfg))

    assert len(found) == 3


class TestRetrieveRelevantFiles:

    def test_returns_matching_rows_in_rank_order(self, embedder):
        files = _files()
        store = _indexed_store(embedder, files)

        rows = run(retrieve_relevant_files(embedder, store, ListFileStore(files), "gamma and beta beta", 1, 2))

        assert [r.name for r in rows] == ["b.md", "c.md"]

    def test_no_matches_gives_empty_list(self, embedder):
        rows = run(retrieve_relevant_files(embedder, InMemoryVectorStore(), ListFileStore(_files()), "alpha", 1, 3))
        assert rows == []

    def test_embedding_errors_propagate(self):
        with pytest.raises(UpstreamServiceError):
            run(
                retrieve_relevant_files(
                    KeywordEmbedder(fail=True), InMemoryVectorStore(), ListFileStore(_files()), "alpha", 1, 3
                )
            )
