"""Vector similarity helpers."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .models import EmbeddingRecord, SimilarityMatch


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0.0 when either has zero magnitude."""
    if len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return dot_product / (norm_a * norm_b)


def same_project(metadata: Optional[dict], project_id) -> bool:
    """Exact project match on record metadata.

    Ids are compared as strings so an integer id from the database matches
    the same id sent as a string by a client.
    """
    if not metadata or "projectId" not in metadata:
        return False
    return str(metadata["projectId"]) == str(project_id)


def rank_records(
    query_vector: Sequence[float],
    records: Iterable[EmbeddingRecord],
    top_k: int,
    project_id=None,
) -> List[SimilarityMatch]:
    """Score records against the query and return the best ``top_k``.

    With ``project_id`` set, records of other projects are dropped before
    ranking so the K slots are never spent on foreign matches.
    """
    if project_id is not None:
        records = [r for r in records if same_project(r.metadata, project_id)]
    scored = [
        SimilarityMatch(id=r.id, score=cosine_similarity(query_vector, r.values), metadata=dict(r.metadata))
        for r in records
    ]
    scored.sort(key=lambda m: m.score, reverse=True)
    return scored[:top_k]
