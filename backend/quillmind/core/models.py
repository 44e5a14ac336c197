"""Data models for quillmind."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, List, Optional


class RoutingDecision(str, enum.Enum):
    EDIT = "edit"
    RETRIEVAL = "retrieval"
    STANDARD = "standard"


@dataclasses.dataclass
class EmbeddingRecord:
    """One indexed file: its vector plus the metadata used for filtering."""

    id: str
    values: List[float]
    metadata: Dict[str, Any]

    @classmethod
    def for_file(cls, project_id: Any, file_id: Any, file_name: str, values: List[float]) -> "EmbeddingRecord":
        return cls(
            id=record_id_for_file(file_id),
            values=list(values),
            metadata={"projectId": project_id, "fileId": file_id, "fileName": file_name},
        )


def record_id_for_file(file_id: Any) -> str:
    return f"file-{file_id}"


@dataclasses.dataclass
class SimilarityMatch:
    id: str
    score: float
    metadata: Dict[str, Any]


@dataclasses.dataclass
class StoredFile:
    """A file row as returned by the file store."""

    file_id: Any
    project_id: Any
    name: str
    content: Optional[str]
    type: str = "file"


@dataclasses.dataclass
class CandidateFile:
    file_id: Any
    name: str
    content: str
    type: str = "file"
    source: str = "context"

    @classmethod
    def from_stored(cls, row: StoredFile, source: str) -> "CandidateFile":
        return cls(
            file_id=row.file_id,
            name=row.name,
            content=row.content or "",
            type=row.type,
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileId": self.file_id,
            "name": self.name,
            "content": self.content,
            "type": self.type,
            "source": self.source,
        }


@dataclasses.dataclass
class MinimizedDiff:
    """Result of trimming a replacement pair down to its differing span.

    When ``minimized`` is true, ``prefix + old_content + suffix`` rebuilds the
    original old text and ``prefix + new_content + suffix`` the new one.
    """

    old_content: str
    new_content: str
    minimized: bool
    prefix: str = ""
    suffix: str = ""


@dataclasses.dataclass
class ChangeRecord:
    id: str
    file_id: Any
    file_name: str
    old_content_full: str
    new_content_full: str
    old_content: str
    new_content: str
    occurrence_index: int
    replacement_type: str
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "fileId": self.file_id,
            "fileName": self.file_name,
            "oldContentFull": self.old_content_full,
            "newContentFull": self.new_content_full,
            "oldContent": self.old_content,
            "newContent": self.new_content,
            "occurrenceIndex": self.occurrence_index,
            "replacementType": self.replacement_type,
        }
        if self.context is not None:
            data["context"] = self.context
        return data


@dataclasses.dataclass
class EditSummary:
    phase: str
    message: str
    files_analyzed: int = 0
    suggestions_made: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "message": self.message,
            "filesAnalyzed": self.files_analyzed,
            "suggestionsMade": self.suggestions_made,
        }


@dataclasses.dataclass
class AssistantResponse:
    """What ``handle_request`` hands back to the surrounding application.

    ``suggestions`` is only set for edit-routed requests.
    """

    result: str
    route: Optional[RoutingDecision] = None
    suggestions: Optional[List[ChangeRecord]] = None
    files_to_open: Optional[List[CandidateFile]] = None
    edit_summary: Optional[EditSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"result": self.result}
        if self.suggestions is not None:
            data["suggestions"] = [s.to_dict() for s in self.suggestions]
        if self.files_to_open is not None:
            data["filesToOpen"] = [f.to_dict() for f in self.files_to_open]
        if self.edit_summary is not None:
            data["editSummary"] = self.edit_summary.to_dict()
        return data
