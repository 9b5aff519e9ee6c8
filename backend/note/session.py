from __future__ import annotations

"""
One editor cycle for a stored note.

load -> extract for prompt -> suggestion source -> merge -> serialize -> persist.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from backend.content import flatten
from backend.internal_core.contracts import Note, NoteUpdate, Task, TaskCreate
from backend.internal_core.note_store import InMemoryNoteStore
from backend.note.suggestion import PROMPT_KINDS, apply_suggestion
from backend.suggest.generator import SuggestionResult, generate_suggestion

logger = logging.getLogger(__name__)

SuggestionCallable = Callable[..., SuggestionResult]


@dataclass(frozen=True)
class AcceptedSuggestion:
    kind: str
    note: Note
    task: Optional[Task] = None
    advisory_text: Optional[str] = None


class NoteEditorSession:
    def __init__(
        self,
        store: InMemoryNoteStore,
        suggestion_callable: SuggestionCallable | None = None,
    ):
        self._store = store
        self._suggest = suggestion_callable or generate_suggestion

    def _require_note(self, note_id: int) -> Note:
        note = self._store.get_note(note_id)
        if note is None:
            raise KeyError(f"Unknown note_id: {note_id}")
        return note

    def note_plain_text(self, note_id: int) -> str:
        return flatten(self._require_note(note_id).content)

    def request_suggestion(self, note_id: int, kind: str) -> SuggestionResult:
        if kind not in PROMPT_KINDS:
            raise ValueError(f"Unsupported prompt kind: {kind}")
        note = self._require_note(note_id)
        existing_tasks: Sequence[str] = [task.description for task in self._store.list_tasks(note_id)]
        return self._suggest(
            kind,
            flatten(note.content),
            note_title=note.title,
            existing_tasks=existing_tasks,
        )

    def accept_suggestion(self, note_id: int, kind: str, suggestion: str) -> AcceptedSuggestion:
        note = self._require_note(note_id)
        outcome = apply_suggestion(kind, note.content, suggestion)

        if outcome.content is not None:
            updated = self._store.update_note(note_id, NoteUpdate(content=outcome.content))
            if updated is None:
                raise KeyError(f"Unknown note_id: {note_id}")
            logger.info("writing suggestion merged note_id=%s chars=%d", note_id, len(suggestion))
            return AcceptedSuggestion(kind=outcome.kind, note=updated)

        if outcome.task_description is not None:
            task = self._store.create_task(note_id, TaskCreate(description=outcome.task_description))
            logger.info("task suggestion accepted note_id=%s task_id=%s", note_id, task.id)
            return AcceptedSuggestion(kind=outcome.kind, note=note, task=task)

        return AcceptedSuggestion(kind=outcome.kind, note=note, advisory_text=outcome.advisory_text)
