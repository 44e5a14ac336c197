"""Core functionality for quillmind."""

from .models import (
    AssistantResponse,
    CandidateFile,
    ChangeRecord,
    EditSummary,
    EmbeddingRecord,
    MinimizedDiff,
    RoutingDecision,
    SimilarityMatch,
    StoredFile,
    record_id_for_file,
)
from .similarity import cosine_similarity, rank_records, same_project
from .embeddings import Embedder, GeminiEmbedder, SentenceTransformersEmbedder, make_embedder

__all__ = [
    "AssistantResponse",
    "CandidateFile",
    "ChangeRecord",
    "EditSummary",
    "EmbeddingRecord",
    "MinimizedDiff",
    "RoutingDecision",
    "SimilarityMatch",
    "StoredFile",
    "record_id_for_file",
    "cosine_similarity",
    "rank_records",
    "same_project",
    "Embedder",
    "GeminiEmbedder",
    "SentenceTransformersEmbedder",
    "make_embedder",
]
