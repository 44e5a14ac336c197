from .minimize import classify_replacement, find_all_occurrences, minimize_diff
from .synthesizer import DiffSynthesizer, ProposedChange, build_edit_summary, parse_proposals

__all__ = [
    "classify_replacement",
    "find_all_occurrences",
    "minimize_diff",
    "DiffSynthesizer",
    "ProposedChange",
    "build_edit_summary",
    "parse_proposals",
]
