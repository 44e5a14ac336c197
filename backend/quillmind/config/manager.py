"""Configuration management for quillmind."""

from __future__ import annotations

import copy
import os
from typing import Dict


DEFAULT_CONFIG: Dict = {
    "llm": {
        "api_base": "https://router.huggingface.co/v1",
        "model": "Qwen/Qwen2.5-Coder-32B-Instruct",
        "max_tokens": 4096,
        "temperature": 0.0,
        "timeout": 60,
    },
    "embedding": {
        "backend": "gemini",
        "gemini_model": "text-embedding-004",
        "sentence_transformers_model": "sentence-transformers/all-MiniLM-L6-v2",
        "timeout": 20,
    },
    "vector_store": {
        "backend": "qdrant",
        "failure_threshold": 3,
        "snapshot_path": None,
        "qdrant": {
            "host": "localhost",
            "port": 6333,
            "collection": "project_embeddings",
            "timeout": 5,
        },
    },
    "retrieval": {
        "rag_top_k": 3,
        "discovery_top_k": 10,
        "fallback_limit": 5,
        "fallback_listing_limit": 20,
    },
    "editing": {
        "max_workers": 4,
        "min_content_chars": 10,
        "file_timeout": 90,
    },
    "prompt": {
        "max_context_tokens": 32000,
        "max_file_tokens": 8000,
    },
    "database_url": "sqlite:///./quillmind.db",
    "log_level": "INFO",
}


def load_config() -> Dict:
    """Load configuration.

    Returns a deep copy of the defaults with environment overrides applied.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Override from environment
    vs = config["vector_store"]
    vs["backend"] = os.getenv("VECTOR_STORE_BACKEND", vs["backend"]).strip().lower()
    vs["snapshot_path"] = os.getenv("VECTOR_SNAPSHOT_PATH") or vs["snapshot_path"]
    vs["qdrant"]["host"] = os.getenv("QDRANT_HOST", vs["qdrant"]["host"])
    vs["qdrant"]["port"] = int(os.getenv("QDRANT_PORT", str(vs["qdrant"]["port"])))
    vs["qdrant"]["collection"] = os.getenv("QDRANT_COLLECTION", vs["qdrant"]["collection"])

    config["embedding"]["backend"] = os.getenv(
        "EMBEDDING_BACKEND", config["embedding"]["backend"]
    ).strip().lower()

    config["llm"]["api_base"] = os.getenv("LLM_API_BASE", config["llm"]["api_base"])
    config["llm"]["model"] = os.getenv("LLM_MODEL", config["llm"]["model"])

    config["database_url"] = os.getenv("DATABASE_URL", config["database_url"])
    config["log_level"] = os.getenv("LOG_LEVEL", config["log_level"]).upper()

    return config
