from __future__ import annotations

from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional, TypeVar

from pydantic import BaseModel

from backend.content import Document, Heading, Paragraph, TextRun, flatten, serialize_content

from .contracts import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
    Task,
    TaskCreate,
    TaskUpdate,
)

_Record = TypeVar("_Record", bound=BaseModel)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _apply_changes(existing: _Record, changes: dict) -> _Record:
    """Revalidate the merged record; an explicit null on a required field raises ValueError."""
    return type(existing).model_validate({**existing.model_dump(), **changes})


def _welcome_content() -> str:
    return serialize_content(
        Document(
            children=(
                Paragraph(
                    children=(
                        TextRun(
                            text=(
                                "Welcome to NoteGenius! This is a Notion-like application where you can "
                                "take notes, create to-do lists, and get AI-powered suggestions."
                            )
                        ),
                    )
                ),
                Heading(level=3, children=(TextRun(text="Tasks for today"),)),
                Paragraph(children=(TextRun(text="Here are some things you can try:"),)),
            )
        )
    )


class InMemoryNoteStore:
    """Categories, notes and tasks kept in process memory. Last write wins."""

    def __init__(self, seed_defaults: bool = True, default_user_id: int = 1):
        self._lock = RLock()
        self._categories: Dict[int, Category] = {}
        self._notes: Dict[int, Note] = {}
        self._tasks: Dict[int, Task] = {}
        self._next_category_id = 1
        self._next_note_id = 1
        self._next_task_id = 1
        if seed_defaults:
            self._seed(default_user_id)

    def _seed(self, user_id: int) -> None:
        for name, color in (("Personal", "blue-500"), ("Work", "green-500"), ("Projects", "yellow-500")):
            self.create_category(user_id, CategoryCreate(name=name, color=color, icon="folder"))
        note = self.create_note(
            user_id,
            NoteCreate(title="Welcome to NoteGenius", content=_welcome_content(), categoryId=1),
        )
        for description in (
            "Try out the editor formatting tools",
            "Create a new note with the + button",
            "Ask for AI suggestions",
        ):
            self.create_task(note.id, TaskCreate(description=description))

    # Categories

    def list_categories(self, user_id: int) -> List[Category]:
        with self._lock:
            return [item.model_copy() for item in self._categories.values() if item.userId == user_id]

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._lock:
            category = self._categories.get(category_id)
            return category.model_copy() if category else None

    def create_category(self, user_id: int, payload: CategoryCreate) -> Category:
        with self._lock:
            category = Category(id=self._next_category_id, userId=user_id, **payload.model_dump())
            self._categories[category.id] = category
            self._next_category_id += 1
            return category.model_copy()

    def update_category(self, category_id: int, payload: CategoryUpdate) -> Optional[Category]:
        with self._lock:
            existing = self._categories.get(category_id)
            if existing is None:
                return None
            updated = _apply_changes(existing, payload.model_dump(exclude_unset=True))
            self._categories[category_id] = updated
            return updated.model_copy()

    def delete_category(self, category_id: int) -> bool:
        with self._lock:
            return self._categories.pop(category_id, None) is not None

    # Notes

    def list_notes(self, user_id: int) -> List[Note]:
        with self._lock:
            return [item.model_copy() for item in self._notes.values() if item.userId == user_id]

    def list_favorite_notes(self, user_id: int) -> List[Note]:
        return [item for item in self.list_notes(user_id) if item.isFavorite]

    def list_archived_notes(self, user_id: int) -> List[Note]:
        return [item for item in self.list_notes(user_id) if item.isArchived]

    def list_notes_by_category(self, category_id: int) -> List[Note]:
        with self._lock:
            return [item.model_copy() for item in self._notes.values() if item.categoryId == category_id]

    def search_notes(self, user_id: int, query: str) -> List[Note]:
        needle = (query or "").strip().lower()
        if not needle:
            return []
        return [
            item
            for item in self.list_notes(user_id)
            if needle in item.title.lower() or needle in flatten(item.content).lower()
        ]

    def get_note(self, note_id: int) -> Optional[Note]:
        with self._lock:
            note = self._notes.get(note_id)
            return note.model_copy() if note else None

    def create_note(self, user_id: int, payload: NoteCreate) -> Note:
        now = _now()
        with self._lock:
            note = Note(
                id=self._next_note_id,
                userId=user_id,
                createdAt=now,
                updatedAt=now,
                **payload.model_dump(),
            )
            self._notes[note.id] = note
            self._next_note_id += 1
            return note.model_copy()

    def update_note(self, note_id: int, payload: NoteUpdate) -> Optional[Note]:
        with self._lock:
            existing = self._notes.get(note_id)
            if existing is None:
                return None
            changes = payload.model_dump(exclude_unset=True)
            changes["updatedAt"] = _now()
            updated = _apply_changes(existing, changes)
            self._notes[note_id] = updated
            return updated.model_copy()

    def delete_note(self, note_id: int) -> bool:
        with self._lock:
            removed = self._notes.pop(note_id, None)
            if removed is None:
                return False
            for task_id in [key for key, task in self._tasks.items() if task.noteId == note_id]:
                del self._tasks[task_id]
            return True

    # Tasks

    def list_tasks(self, note_id: int) -> List[Task]:
        with self._lock:
            return [item.model_copy() for item in self._tasks.values() if item.noteId == note_id]

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy() if task else None

    def create_task(self, note_id: int, payload: TaskCreate) -> Task:
        with self._lock:
            task = Task(id=self._next_task_id, noteId=note_id, **payload.model_dump())
            self._tasks[task.id] = task
            self._next_task_id += 1
            return task.model_copy()

    def update_task(self, task_id: int, payload: TaskUpdate) -> Optional[Task]:
        with self._lock:
            existing = self._tasks.get(task_id)
            if existing is None:
                return None
            updated = _apply_changes(existing, payload.model_dump(exclude_unset=True))
            self._tasks[task_id] = updated
            return updated.model_copy()

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None
