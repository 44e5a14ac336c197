"""Responder interface and the request it receives."""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

from ..core import AssistantResponse


@dataclasses.dataclass
class AssistantRequest:
    text: str
    context: Optional[Dict[str, Any]] = None
    project_id: Any = None
    history: List[Dict[str, str]] = dataclasses.field(default_factory=list)

    @property
    def context_files(self) -> List[Dict[str, Any]]:
        if not self.context:
            return []
        return list(self.context.get("files") or [])

    @property
    def has_file_context(self) -> bool:
        return len(self.context_files) > 0


class Responder:
    """Abstract base class for the handlers a routed request is sent to."""

    async def respond(self, request: AssistantRequest) -> AssistantResponse:
        raise NotImplementedError
