"""Embedding models for semantic search."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Dict, List

import requests

from ..errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

QUERY = "query"
DOCUMENT = "document"


class Embedder:
    """Abstract base class for embedding models."""

    def embed(self, texts: List[str], task: str = DOCUMENT) -> List[List[float]]:
        """Embed multiple texts into vectors."""
        raise NotImplementedError

    def embed_one(self, text: str, task: str = QUERY) -> List[float]:
        """Embed a single text into a vector."""
        return self.embed([text], task=task)[0]

    async def aembed_one(self, text: str, task: str = QUERY) -> List[float]:
        return await asyncio.to_thread(self.embed_one, text, task)

    async def aembed(self, texts: List[str], task: str = DOCUMENT) -> List[List[float]]:
        return await asyncio.to_thread(self.embed, texts, task)


class GeminiEmbedder(Embedder):
    """Embedder backed by the Gemini ``embedContent`` endpoint."""

    API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
    TASK_TYPES = {QUERY: "RETRIEVAL_QUERY", DOCUMENT: "RETRIEVAL_DOCUMENT"}
    # The model limit is ~2k tokens; longer input is cut rather than rejected.
    MAX_CHARS = 30000

    def __init__(self, model: str = "text-embedding-004", timeout: float = 20, api_key: str | None = None):
        self.model = model
        self.timeout = timeout
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable not set")

    def _embed_text(self, text: str, task: str) -> List[float]:
        url = f"{self.API_BASE}/{self.model}:embedContent"
        payload = {
            "model": f"models/{self.model}",
            "content": {"parts": [{"text": text[: self.MAX_CHARS]}]},
            "taskType": self.TASK_TYPES.get(task, "RETRIEVAL_QUERY"),
        }
        try:
            response = requests.post(
                url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            values = response.json()["embedding"]["values"]
        except requests.RequestException as e:
            status = getattr(e.response, "status_code", None)
            logger.error(f"Embedding request failed ({status}): {e}")
            raise UpstreamServiceError("Failed to generate text embedding.", status_code=status) from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected embedding response shape: {e}")
            raise UpstreamServiceError("Failed to generate text embedding.") from e

        if not values:
            raise UpstreamServiceError("Embedding service returned an empty vector.")
        return [float(v) for v in values]

    def embed(self, texts: List[str], task: str = DOCUMENT) -> List[List[float]]:
        return [self._embed_text(t, task) for t in texts]


class SentenceTransformersEmbedder(Embedder):
    """Embedder using SentenceTransformers library."""

    def __init__(self, model_name: str) -> None:
        from sentence_transformers import SentenceTransformer  # type: ignore
        self.model = SentenceTransformer(model_name)

    def embed(self, texts: List[str], task: str = DOCUMENT) -> List[List[float]]:
        """Embed texts using SentenceTransformers model."""
        arr = self.model.encode(texts, normalize_embeddings=True, show_progress_bar=False)
        return [row.tolist() for row in arr]


def make_embedder(cfg: Dict) -> Embedder:
    """Create embedder from config.

    Raises:
        ConfigurationError: If the backend is unknown, its key is missing or
            its dependencies are not installed
    """
    emb_cfg = cfg.get("embedding", {})
    backend = str(emb_cfg.get("backend", "gemini")).strip().lower()

    if backend == "gemini":
        return GeminiEmbedder(
            model=emb_cfg.get("gemini_model", "text-embedding-004"),
            timeout=emb_cfg.get("timeout", 20),
        )

    if backend == "sentence_transformers":
        model_name = emb_cfg.get("sentence_transformers_model", "all-MiniLM-L6-v2")
        try:
            return SentenceTransformersEmbedder(model_name)
        except ImportError as e:
            raise ConfigurationError(
                "sentence-transformers is not installed. "
                "Run: pip install 'quillmind-backend[local-embeddings]'"
            ) from e

    raise ConfigurationError(f"Invalid embedding.backend: {backend!r}")
