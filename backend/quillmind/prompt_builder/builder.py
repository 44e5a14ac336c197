from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..core import StoredFile

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... [truncated]"


def _get_token_counter(model: str | None = None) -> Callable[[str], int]:
    try:
        import tiktoken  # type: ignore

        encoding = tiktoken.encoding_for_model(model) if model else tiktoken.get_encoding("cl100k_base")

        def count_tokens(text: str) -> int:
            return len(encoding.encode(text))

        return count_tokens
    except Exception:
        def count_tokens(text: str) -> int:
            return max(1, int(len(text) / 3.5))

        return count_tokens


@dataclass(frozen=True)
class PromptConfig:
    max_tokens: int = 32000
    max_file_tokens: int = 8000
    model: str | None = None


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def _read_template(filename: str) -> str:
    path = TEMPLATE_DIR / filename
    return path.read_text(encoding="utf-8")


def truncate_to_tokens(text: str, limit: int, count_tokens: Callable[[str], int]) -> str:
    """Cut ``text`` so that it fits in ``limit`` tokens, marking the cut."""
    if count_tokens(text) <= limit:
        return text
    cut = int(len(text) * limit / max(1, count_tokens(text)))
    while cut > 0 and count_tokens(text[:cut] + TRUNCATION_MARKER) > limit:
        cut = int(cut * 0.9)
    return text[:cut] + TRUNCATION_MARKER


def format_history(history: Optional[Sequence[Dict[str, str]]]) -> str:
    if not history:
        return ""
    lines = [f"{msg.get('author', 'user')}: {msg.get('text', '')}" for msg in history]
    return "Here is the conversation history:\n---\n" + "\n".join(lines) + "\n---\n\n"


def format_file_section(name: str, content: str) -> str:
    return f'File: "{name}"\n---\n{content}\n---'


class PromptBuilder:
    def __init__(self, config: PromptConfig | None = None):
        self.config = config or PromptConfig()
        self.count_tokens = _get_token_counter(self.config.model)

    def _budgeted_sections(self, files: Sequence[tuple[str, str]]) -> List[str]:
        sections: List[str] = []
        used = 0
        for name, content in files:
            body = truncate_to_tokens(content or "", self.config.max_file_tokens, self.count_tokens)
            section = format_file_section(name, body)
            tokens = self.count_tokens(section)
            if sections and used + tokens > self.config.max_tokens:
                logger.warning(f"Context budget reached, dropping {len(files) - len(sections)} file(s)")
                break
            sections.append(section)
            used += tokens
        return sections

    def build_route_prompt(self, text: str, has_file_context: bool) -> str:
        tpl = _read_template("route_prompt.md")
        return tpl.format(text=text, context_provided="Yes" if has_file_context else "No")

    def build_edit_system_prompt(self, edit_request: str, file_name: str) -> str:
        tpl = _read_template("edit_system.md")
        return tpl.format(edit_request=edit_request, file_name=file_name)

    def build_edit_file_message(self, file_name: str, content: str) -> str:
        # The whole file is sent; proposals are checked against the real content anyway.
        tpl = _read_template("edit_user.md")
        body = truncate_to_tokens(content, self.config.max_tokens, self.count_tokens)
        return tpl.format(file_name=file_name, content=body)

    def build_chat_prompt(
        self,
        text: str,
        context_files: Optional[Sequence[Dict[str, str]]] = None,
        history: Optional[Sequence[Dict[str, str]]] = None,
    ) -> str:
        file_context = ""
        if context_files:
            sections = self._budgeted_sections(
                [(f.get("fileName", ""), f.get("fileContent", "")) for f in context_files]
            )
            file_context = "Given the following file contexts:\n\n" + "\n\n".join(sections) + "\n\n"
        tpl = _read_template("chat_prompt.md")
        return tpl.format(file_context=file_context, history=format_history(history), text=text).rstrip()

    def build_rag_prompt(
        self,
        text: str,
        files: Sequence[StoredFile],
        history: Optional[Sequence[Dict[str, str]]] = None,
    ) -> str:
        sections = self._budgeted_sections([(f.name, f.content or "") for f in files])
        tpl = _read_template("rag_prompt.md")
        return tpl.format(
            file_context="\n\n".join(sections),
            history=format_history(history),
            text=text,
        ).rstrip()

    def build_title_prompt(self, text: str) -> str:
        return _read_template("title_prompt.md").format(text=text).rstrip()


def make_prompt_builder(cfg: Dict) -> PromptBuilder:
    prompt_cfg = cfg.get("prompt", {})
    return PromptBuilder(
        PromptConfig(
            max_tokens=prompt_cfg.get("max_context_tokens", 32000),
            max_file_tokens=prompt_cfg.get("max_file_tokens", 8000),
        )
    )
