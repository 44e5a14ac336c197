"""File discovery interface."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..core import CandidateFile


class FileDiscovery:
    """Abstract base class for finding the files an edit request should touch."""

    async def discover(
        self,
        edit_request: str,
        context_files: Optional[Sequence[Dict[str, Any]]],
        project_id: Any,
    ) -> List[CandidateFile]:
        """Collect candidate files for an edit request.

        Args:
            edit_request: The user's request text
            context_files: Files the caller has open, as ``{"fileName": ...}`` dicts
            project_id: Project whose files may be returned

        Returns:
            Candidate files, at most one per file name, context files first
        """
        raise NotImplementedError
