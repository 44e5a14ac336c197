"""Handlers for standard, retrieval and edit requests."""

from __future__ import annotations

import logging
from typing import List

from ..core import AssistantResponse, ChangeRecord, Embedder, EditSummary, RoutingDecision
from ..editing import DiffSynthesizer, build_edit_summary
from ..errors import InvalidRequestError
from ..prompt_builder import PromptBuilder
from ..search import FileDiscovery, retrieve_relevant_files
from ..storage import FileStore, VectorStore
from .base import AssistantRequest, Responder

logger = logging.getLogger(__name__)

NOT_INDEXED_MESSAGE = (
    "I couldn't find any relevant files in the project to answer your question. "
    "This might be because your project hasn't been indexed yet. "
    "Try indexing your project first by clicking the 'Index Project' button in the Project Explorer, "
    "then ask your question again."
)

NO_FILES_MESSAGE = (
    "I couldn't identify any files that need to be edited based on your request. "
    "Please specify which files you'd like me to modify or provide more context about the changes you want to make."
)

NO_CHANGES_MESSAGE = (
    "I analyzed the relevant files but no changes were needed. "
    "This could mean the requested changes are already applied, "
    "or the query wasn't specific enough to identify what needs to be modified."
)


class StandardResponder(Responder):
    """Plain chat over the files the caller supplied and the conversation so far."""

    def __init__(self, llm, prompt_builder: PromptBuilder):
        self.llm = llm
        self.prompt_builder = prompt_builder

    async def respond(self, request: AssistantRequest) -> AssistantResponse:
        prompt = self.prompt_builder.build_chat_prompt(request.text, request.context_files, request.history)
        result = await self.llm.complete(prompt)
        return AssistantResponse(result=result, route=RoutingDecision.STANDARD)


class RetrievalResponder(Responder):
    """Answers from the project's most similar indexed files."""

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        file_store: FileStore,
        llm,
        prompt_builder: PromptBuilder,
        top_k: int = 3,
    ):
        self.embedder = embedder
        self.vector_store = vector_store
        self.file_store = file_store
        self.llm = llm
        self.prompt_builder = prompt_builder
        self.top_k = top_k

    async def respond(self, request: AssistantRequest) -> AssistantResponse:
        if request.project_id is None or request.project_id == "":
            raise InvalidRequestError("Project ID is required for RAG chat.")

        files = await retrieve_relevant_files(
            self.embedder,
            self.vector_store,
            self.file_store,
            request.text,
            request.project_id,
            self.top_k,
        )
        if not files:
            return AssistantResponse(result=NOT_INDEXED_MESSAGE, route=RoutingDecision.RETRIEVAL)

        prompt = self.prompt_builder.build_rag_prompt(request.text, files, request.history)
        result = await self.llm.complete(prompt)
        return AssistantResponse(result=result, route=RoutingDecision.RETRIEVAL)


class EditResponder(Responder):
    """Discovery, then diff synthesis, then a summary of what was proposed."""

    def __init__(self, discovery: FileDiscovery, synthesizer: DiffSynthesizer):
        self.discovery = discovery
        self.synthesizer = synthesizer

    async def respond(self, request: AssistantRequest) -> AssistantResponse:
        if request.project_id is None or request.project_id == "":
            raise InvalidRequestError("Project ID is required for edit requests.")

        logger.info(f'Processing edit request "{request.text[:80]}" for project {request.project_id}')
        files = await self.discovery.discover(request.text, request.context_files, request.project_id)
        if not files:
            return AssistantResponse(
                result=NO_FILES_MESSAGE,
                route=RoutingDecision.EDIT,
                suggestions=[],
                files_to_open=[],
                edit_summary=EditSummary(phase="file_discovery", message="No files identified for editing"),
            )

        per_file = await self.synthesizer.synthesize_all(files, request.text)
        changes: List[ChangeRecord] = [change for records in per_file for change in records]
        if not changes:
            return AssistantResponse(
                result=NO_CHANGES_MESSAGE,
                route=RoutingDecision.EDIT,
                suggestions=[],
                files_to_open=[],
                edit_summary=EditSummary(
                    phase="diff_generation",
                    message="No changes could be generated",
                    files_analyzed=len(files),
                ),
            )

        files_with_edits = [f for f, records in zip(files, per_file) if records]
        summary = build_edit_summary(files_with_edits, changes)
        logger.info(f"Prepared {len(changes)} change(s) across {len(files_with_edits)} file(s)")
        return AssistantResponse(
            result=summary.message,
            route=RoutingDecision.EDIT,
            suggestions=changes,
            files_to_open=files_with_edits,
            edit_summary=summary,
        )
