from __future__ import annotations

import asyncio
import json
import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core import CandidateFile, ChangeRecord, EditSummary
from ..errors import UpstreamServiceError
from ..prompt_builder import PromptBuilder
from .minimize import classify_replacement, find_all_occurrences, minimize_diff

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ProposedChange(BaseModel):
    """One ``{oldContent, newContent}`` entry as emitted by the model."""

    model_config = ConfigDict(populate_by_name=True)

    old_content: str = Field(alias="oldContent")
    new_content: str = Field(default="", alias="newContent")
    context: Optional[str] = None

    @field_validator("context", mode="before")
    @classmethod
    def _drop_non_text_context(cls, value: Any) -> Optional[str]:
        # non-text context is dropped, the change itself is kept
        return value if isinstance(value, str) else None


def generate_change_id() -> str:
    return f"chg-{uuid.uuid4().hex[:12]}"


def parse_proposals(raw: str) -> List[Dict[str, Any]]:
    """Pull the ``changes`` array out of a model reply.

    Raises:
        ValueError: If the reply is not a JSON object with a ``changes`` list
    """
    text = (raw or "").strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    changes = data.get("changes", [])
    if changes is None:
        return []
    if not isinstance(changes, list):
        raise ValueError("'changes' must be an array")
    return changes


class DiffSynthesizer:
    """Turns model edit proposals into validated change records, one file at a time."""

    def __init__(
        self,
        llm,
        prompt_builder: PromptBuilder,
        min_content_chars: int = 10,
        max_workers: int = 4,
        file_timeout: Optional[float] = None,
    ):
        self.llm = llm
        self.prompt_builder = prompt_builder
        self.min_content_chars = min_content_chars
        self.max_workers = max_workers
        self.file_timeout = file_timeout

    async def _propose(self, file: CandidateFile, edit_request: str) -> List[Dict[str, Any]]:
        system_prompt = self.prompt_builder.build_edit_system_prompt(edit_request, file.name)
        message = self.prompt_builder.build_edit_file_message(file.name, file.content)
        raw = await self.llm.complete(
            message,
            system_prompt=system_prompt,
            json_mode=True,
            temperature=0.0,
        )
        return parse_proposals(raw)

    def reconcile(self, file: CandidateFile, proposals: Sequence[Any]) -> List[ChangeRecord]:
        """Validate, disambiguate and minimize proposals against the file content.

        Proposals are handled strictly in order; occurrence indices are
        handed out in that same order.
        """
        content = file.content or ""
        claimed: Dict[str, int] = {}
        records: List[ChangeRecord] = []

        for position, item in enumerate(proposals):
            try:
                proposal = ProposedChange.model_validate(item)
            except ValidationError as e:
                logger.warning(f"[{file.name}] Skipping malformed change #{position}: {e.error_count()} error(s)")
                continue

            old_full = proposal.old_content
            new_full = proposal.new_content
            if not old_full:
                logger.warning(f"[{file.name}] Skipping change #{position}: empty oldContent")
                continue
            if old_full not in content:
                logger.warning(f"[{file.name}] Skipping change #{position}: oldContent not found in file")
                continue
            if old_full == new_full:
                logger.info(f"[{file.name}] Skipping change #{position}: no-op replacement")
                continue

            occurrences = find_all_occurrences(content, old_full)
            already = claimed.get(old_full, 0)
            if already >= len(occurrences):
                logger.warning(
                    f"[{file.name}] Skipping change #{position}: ambiguous occurrence "
                    f"({already} claimed, {len(occurrences)} present)"
                )
                continue
            claimed[old_full] = already + 1

            diff = minimize_diff(old_full, new_full)
            records.append(
                ChangeRecord(
                    id=generate_change_id(),
                    file_id=file.file_id,
                    file_name=file.name,
                    old_content_full=old_full,
                    new_content_full=new_full,
                    old_content=diff.old_content,
                    new_content=diff.new_content,
                    occurrence_index=already,
                    replacement_type=classify_replacement(diff.old_content),
                    context=proposal.context,
                )
            )

        return records

    async def synthesize(self, file: CandidateFile, edit_request: str) -> List[ChangeRecord]:
        """Ask the model for changes to one file and keep only the valid ones.

        Upstream failures and unparseable replies give an empty list so that
        one bad file never aborts a batch.
        """
        if not file.content or len(file.content) < self.min_content_chars:
            logger.info(f"Skipping {file.name}: content is empty or too short")
            return []

        try:
            proposals = await self._propose(file, edit_request)
        except UpstreamServiceError as e:
            logger.error(f"Diff generation failed for {file.name}: {e.message}")
            return []
        except ValueError as e:
            logger.error(f"Unparseable edit proposal for {file.name}: {e}")
            return []

        if not proposals:
            logger.info(f"No changes proposed for {file.name}")
            return []

        logger.info(f"Received {len(proposals)} raw change(s) for {file.name}")
        records = self.reconcile(file, proposals)
        logger.info(f"Kept {len(records)} change(s) for {file.name}")
        return records

    async def synthesize_all(self, files: Sequence[CandidateFile], edit_request: str) -> List[List[ChangeRecord]]:
        """Run ``synthesize`` for every file with bounded concurrency.

        Returns one list per input file, in input order.
        """
        semaphore = asyncio.Semaphore(self.max_workers)

        async def run(file: CandidateFile) -> List[ChangeRecord]:
            async with semaphore:
                try:
                    if self.file_timeout:
                        return await asyncio.wait_for(self.synthesize(file, edit_request), self.file_timeout)
                    return await self.synthesize(file, edit_request)
                except asyncio.TimeoutError:
                    logger.error(f"Diff generation timed out for {file.name}")
                    return []
                except Exception as e:
                    logger.exception(f"Diff generation crashed for {file.name}: {e}")
                    return []

        return list(await asyncio.gather(*(run(f) for f in files)))


def build_edit_summary(files_with_edits: Sequence[CandidateFile], changes: Sequence[ChangeRecord]) -> EditSummary:
    file_count = len(files_with_edits)
    change_count = len(changes)

    if change_count == 0:
        return EditSummary(
            phase="summary",
            message="I analyzed the files but found no changes were needed. The content may already be correct.",
            files_analyzed=file_count,
            suggestions_made=0,
        )

    names: List[str] = []
    for change in changes:
        if change.file_name not in names:
            names.append(change.file_name)

    return EditSummary(
        phase="summary",
        message=(
            f"I've prepared {change_count} change{'s' if change_count > 1 else ''} "
            f"in {file_count} file{'s' if file_count > 1 else ''}: {', '.join(names)}. "
            "Please review the suggestions in the editor."
        ),
        files_analyzed=file_count,
        suggestions_made=change_count,
    )
