from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from ..core import AssistantResponse, Embedder, RoutingDecision, make_embedder
from ..editing import DiffSynthesizer
from ..errors import InvalidRequestError
from ..prompt_builder import PromptBuilder, make_llm_client, make_prompt_builder
from ..search import DefaultFileDiscovery
from ..storage import FileStore, SqlFileStore, VectorStore, create_vector_store, make_fallback_store
from .base import AssistantRequest
from .responders import EditResponder, RetrievalResponder, StandardResponder
from .router import IntentRouter

logger = logging.getLogger(__name__)

SUMMARIZE_FOR_TITLE = "summarize_for_title"


class AssistantPipeline:
    """Single entry point for AI requests.

    Every collaborator is injected; nothing here reaches for globals.
    """

    def __init__(
        self,
        router: IntentRouter,
        standard: StandardResponder,
        retrieval: RetrievalResponder,
        edit: EditResponder,
        prompt_builder: PromptBuilder,
    ):
        self.router = router
        self.standard = standard
        self.retrieval = retrieval
        self.edit = edit
        self.prompt_builder = prompt_builder

    async def handle_request(
        self,
        text: str,
        context: Optional[Dict[str, Any]] = None,
        project_id: Any = None,
        history: Optional[List[Dict[str, str]]] = None,
        action: Optional[str] = None,
    ) -> AssistantResponse:
        if not text or not text.strip():
            raise InvalidRequestError("Text is required.")

        request = AssistantRequest(text=text, context=context, project_id=project_id, history=list(history or []))

        if action == SUMMARIZE_FOR_TITLE:
            logger.info("Summarizing request for a chat title")
            request.text = self.prompt_builder.build_title_prompt(text)
            return await self.standard.respond(request)
        if action:
            raise InvalidRequestError(f"Unsupported action: {action}")

        decision = await self.router.classify(text, request.has_file_context)
        handler = self.router.dispatch(
            decision,
            {
                RoutingDecision.EDIT: self.edit.respond,
                RoutingDecision.RETRIEVAL: self.retrieval.respond,
                RoutingDecision.STANDARD: self.standard.respond,
            },
        )
        response = await handler(request)
        response.route = decision
        return response


def build_pipeline(
    cfg: Dict,
    llm=None,
    embedder: Optional[Embedder] = None,
    vector_store: Optional[VectorStore] = None,
    file_store: Optional[FileStore] = None,
) -> AssistantPipeline:
    """Wire the production pipeline. Meant to be called once per process."""
    if llm is None:
        llm = make_llm_client(cfg)
    if embedder is None:
        embedder = make_embedder(cfg)
    if vector_store is None:
        vector_store = create_vector_store(cfg, make_fallback_store(cfg))
    if file_store is None:
        from ..web.database import make_engine

        file_store = SqlFileStore(sessionmaker(bind=make_engine(cfg["database_url"])))

    retrieval_cfg = cfg.get("retrieval", {})
    editing_cfg = cfg.get("editing", {})
    prompt_builder = make_prompt_builder(cfg)

    discovery = DefaultFileDiscovery(
        embedder,
        vector_store,
        file_store,
        top_k=retrieval_cfg.get("discovery_top_k", 10),
        fallback_limit=retrieval_cfg.get("fallback_limit", 5),
        listing_limit=retrieval_cfg.get("fallback_listing_limit", 20),
    )
    synthesizer = DiffSynthesizer(
        llm,
        prompt_builder,
        min_content_chars=editing_cfg.get("min_content_chars", 10),
        max_workers=editing_cfg.get("max_workers", 4),
        file_timeout=editing_cfg.get("file_timeout"),
    )
    return AssistantPipeline(
        router=IntentRouter(llm, prompt_builder),
        standard=StandardResponder(llm, prompt_builder),
        retrieval=RetrievalResponder(
            embedder,
            vector_store,
            file_store,
            llm,
            prompt_builder,
            top_k=retrieval_cfg.get("rag_top_k", 3),
        ),
        edit=EditResponder(discovery, synthesizer),
        prompt_builder=prompt_builder,
    )
