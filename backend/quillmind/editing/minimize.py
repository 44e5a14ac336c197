"""Shrinking replacement pairs and locating repeated text."""

from __future__ import annotations

from typing import List, Tuple

from ..core import MinimizedDiff

WORD_MAX_CHARS = 15
PHRASE_MAX_CHARS = 50
SENTENCE_MAX_CHARS = 150


def _common_prefix_len(a: str, b: str) -> int:
    n = 0
    limit = min(len(a), len(b))
    while n < limit and a[n] == b[n]:
        n += 1
    return n


def _common_suffix_len(a: str, b: str) -> int:
    n = 0
    limit = min(len(a), len(b))
    while n < limit and a[len(a) - 1 - n] == b[len(b) - 1 - n]:
        n += 1
    return n


def _split_whitespace(text: str) -> Tuple[str, str, str]:
    """Return (leading whitespace, stripped body, trailing whitespace)."""
    body = text.strip()
    if not body:
        return text, "", ""
    start = text.index(body)
    return text[:start], body, text[start + len(body):]


def minimize_diff(old_full: str, new_full: str) -> MinimizedDiff:
    """Reduce ``old_full -> new_full`` to the span that actually differs.

    The shared prefix and suffix are removed and surrounding whitespace is
    trimmed from what remains. The untrimmed pair is returned with
    ``minimized=False`` when:

    * the old side ends up empty while the new side does not (an insertion
      needs old text to anchor it);
    * the new side still contains the old side and they differ;
    * whitespace trimming would drop different whitespace from the two sides,
      which would make the pair impossible to rebuild.
    """
    old_full = old_full or ""
    new_full = new_full or ""
    unminimized = MinimizedDiff(old_content=old_full, new_content=new_full, minimized=False)

    p = _common_prefix_len(old_full, new_full)
    old_rest, new_rest = old_full[p:], new_full[p:]
    s = _common_suffix_len(old_rest, new_rest)
    old_core = old_rest[: len(old_rest) - s]
    new_core = new_rest[: len(new_rest) - s]
    prefix = old_full[:p]
    suffix = old_rest[len(old_rest) - s:] if s else ""

    old_lead, old_body, old_trail = _split_whitespace(old_core)
    new_lead, new_body, new_trail = _split_whitespace(new_core)
    if old_lead != new_lead or old_trail != new_trail:
        return unminimized

    if old_body == "" and new_body != "":
        return unminimized
    if old_body in new_body and old_body != new_body:
        return unminimized

    return MinimizedDiff(
        old_content=old_body,
        new_content=new_body,
        minimized=True,
        prefix=prefix + old_lead,
        suffix=old_trail + suffix,
    )


def find_all_occurrences(source: str, search: str) -> List[int]:
    """Start offsets of every (possibly overlapping) occurrence of ``search``."""
    indices: List[int] = []
    if not search:
        return indices
    i = source.find(search)
    while i != -1:
        indices.append(i)
        i = source.find(search, i + 1)
    return indices


def classify_replacement(text: str) -> str:
    length = len(text)
    if length <= WORD_MAX_CHARS:
        return "word"
    if length <= PHRASE_MAX_CHARS:
        return "phrase"
    if length <= SENTENCE_MAX_CHARS:
        return "sentence"
    return "block"
