from __future__ import annotations

"""
Route an accepted suggestion by prompt kind.

- writing: merged into the note content tree.
- task: becomes a new task description for the note; content untouched.
- structure: advisory text only; never applied automatically.
"""

from dataclasses import dataclass
from typing import Optional

from backend.content import insert_suggestion, parse_content, serialize_content
from backend.internal_core.contracts import PromptKind

PROMPT_KINDS: tuple[str, ...] = ("writing", "task", "structure")


@dataclass(frozen=True)
class SuggestionOutcome:
    kind: PromptKind
    content: Optional[str] = None
    task_description: Optional[str] = None
    advisory_text: Optional[str] = None


def apply_suggestion(kind: str, content: str, suggestion: str) -> SuggestionOutcome:
    if kind == "writing":
        merged = insert_suggestion(parse_content(content), suggestion)
        return SuggestionOutcome(kind="writing", content=serialize_content(merged))
    if kind == "task":
        return SuggestionOutcome(kind="task", task_description=suggestion)
    if kind == "structure":
        return SuggestionOutcome(kind="structure", advisory_text=suggestion)
    raise ValueError(f"Unsupported prompt kind: {kind}")
