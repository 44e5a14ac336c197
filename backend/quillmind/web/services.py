"""Process-wide service wiring for the web app."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from ..agents import AssistantPipeline, build_pipeline
from ..core import make_embedder
from ..indexing import IndexingService
from ..prompt_builder import make_llm_client
from ..storage import SqlFileStore, VectorStore, create_vector_store, make_fallback_store
from .database import Base, make_engine

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Services:
    pipeline: AssistantPipeline
    indexing: IndexingService
    vector_store: VectorStore


def build_services(cfg: Dict) -> Services:
    engine = make_engine(cfg["database_url"])
    Base.metadata.create_all(bind=engine)
    file_store = SqlFileStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))

    embedder = make_embedder(cfg)
    vector_store = create_vector_store(cfg, make_fallback_store(cfg))
    llm = make_llm_client(cfg)

    pipeline = build_pipeline(cfg, llm=llm, embedder=embedder, vector_store=vector_store, file_store=file_store)
    indexing = IndexingService(embedder, vector_store, file_store)
    logger.info(f"Services ready (vector store: {vector_store.name})")
    return Services(pipeline=pipeline, indexing=indexing, vector_store=vector_store)


def get_services(request: Request) -> Services:
    """FastAPI dependency. Re-raises a startup configuration error on every call."""
    error = getattr(request.app.state, "config_error", None)
    if error is not None:
        raise error
    return request.app.state.services
