from __future__ import annotations

"""
HTTP surface for the notes backend.

Design intent:
- Keep API orchestration thin and typed.
- Delegate content handling to content/note/suggest modules.
- Map domain errors to HTTP status codes at this boundary only.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from backend.internal_core.config import NotesConfig, load_config
from backend.internal_core.contracts import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
    PromptKind,
    Task,
    TaskCreate,
    TaskUpdate,
)
from backend.internal_core.note_store import InMemoryNoteStore
from backend.note.session import NoteEditorSession
from backend.suggest.generator import generate_suggestion


class SuggestRequest(BaseModel):
    promptType: Optional[PromptKind] = None
    currentText: Optional[str] = None
    noteTitle: Optional[str] = None
    existingTasks: list[str] = Field(default_factory=list)


class SuggestResponse(BaseModel):
    suggestion: str
    confidence: float


class AcceptSuggestionRequest(BaseModel):
    promptType: PromptKind
    suggestion: str


class AcceptSuggestionResponse(BaseModel):
    promptType: PromptKind
    note: Note
    task: Optional[Task] = None
    advisory: Optional[str] = None


class NoteTextResponse(BaseModel):
    noteId: int
    text: str


app = FastAPI(title="notegenius backend service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> NotesConfig:
    existing = getattr(app.state, "notes_config", None)
    if isinstance(existing, NotesConfig):
        return existing
    created = load_config()
    logging.basicConfig(level=created.NOTES_LOG_LEVEL.upper())
    setattr(app.state, "notes_config", created)
    return created


def _get_store() -> InMemoryNoteStore:
    existing = getattr(app.state, "note_store", None)
    if isinstance(existing, InMemoryNoteStore):
        return existing
    config = _get_config()
    created = InMemoryNoteStore(
        seed_defaults=config.NOTES_SEED_DEFAULTS,
        default_user_id=config.NOTES_DEFAULT_USER_ID,
    )
    setattr(app.state, "note_store", created)
    return created


def _suggestion_callable() -> Any:
    injected = getattr(app.state, "suggestion_callable", None)
    if callable(injected):
        return injected
    config = _get_config()

    def run(*args: Any, **kwargs: Any):
        return generate_suggestion(*args, config=config, **kwargs)

    return run


def _get_editor_session() -> NoteEditorSession:
    return NoteEditorSession(_get_store(), suggestion_callable=_suggestion_callable())


def _user_id() -> int:
    # No authentication layer; every request acts as the configured user.
    return _get_config().NOTES_DEFAULT_USER_ID


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/categories", response_model=list[Category])
async def list_categories() -> list[Category]:
    return _get_store().list_categories(_user_id())


@app.post("/api/categories", response_model=Category, status_code=201)
async def create_category(payload: CategoryCreate) -> Category:
    return _get_store().create_category(_user_id(), payload)


@app.put("/api/categories/{category_id}", response_model=Category)
async def update_category(category_id: int, payload: CategoryUpdate) -> Category:
    try:
        category = _get_store().update_category(category_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@app.delete("/api/categories/{category_id}", status_code=204)
async def delete_category(category_id: int) -> Response:
    if not _get_store().delete_category(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return Response(status_code=204)


@app.get("/api/notes", response_model=list[Note])
async def list_notes(
    favorite: bool = False,
    archived: bool = False,
    categoryId: Optional[int] = None,
    q: Optional[str] = Query(default=None, max_length=256),
) -> list[Note]:
    store = _get_store()
    user_id = _user_id()
    if q is not None and q.strip():
        return store.search_notes(user_id, q)
    if favorite:
        return store.list_favorite_notes(user_id)
    if archived:
        return store.list_archived_notes(user_id)
    if categoryId:
        return store.list_notes_by_category(categoryId)
    return store.list_notes(user_id)


@app.get("/api/notes/{note_id}", response_model=Note)
async def get_note(note_id: int) -> Note:
    note = _get_store().get_note(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@app.get("/api/notes/{note_id}/text", response_model=NoteTextResponse)
async def get_note_text(note_id: int) -> NoteTextResponse:
    try:
        text = _get_editor_session().note_plain_text(note_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Note not found") from exc
    return NoteTextResponse(noteId=note_id, text=text)


@app.post("/api/notes", response_model=Note, status_code=201)
async def create_note(payload: NoteCreate) -> Note:
    return _get_store().create_note(_user_id(), payload)


@app.put("/api/notes/{note_id}", response_model=Note)
async def update_note(note_id: int, payload: NoteUpdate) -> Note:
    try:
        note = _get_store().update_note(note_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@app.delete("/api/notes/{note_id}", status_code=204)
async def delete_note(note_id: int) -> Response:
    if not _get_store().delete_note(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return Response(status_code=204)


@app.get("/api/notes/{note_id}/tasks", response_model=list[Task])
async def list_tasks(note_id: int) -> list[Task]:
    return _get_store().list_tasks(note_id)


@app.post("/api/notes/{note_id}/tasks", response_model=Task, status_code=201)
async def create_task(note_id: int, payload: TaskCreate) -> Task:
    store = _get_store()
    if store.get_note(note_id) is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return store.create_task(note_id, payload)


@app.put("/api/tasks/{task_id}", response_model=Task)
async def update_task(task_id: int, payload: TaskUpdate) -> Task:
    try:
        task = _get_store().update_task(task_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@app.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(task_id: int) -> Response:
    if not _get_store().delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return Response(status_code=204)


@app.post("/api/ai/suggest", response_model=SuggestResponse)
async def ai_suggest(payload: SuggestRequest) -> SuggestResponse:
    if not payload.promptType or not payload.currentText:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: promptType and currentText are required",
        )
    result = _suggestion_callable()(
        payload.promptType,
        payload.currentText,
        note_title=payload.noteTitle,
        existing_tasks=list(payload.existingTasks),
    )
    return SuggestResponse(suggestion=result.suggestion, confidence=result.confidence)


@app.post("/api/notes/{note_id}/suggestion", response_model=SuggestResponse)
async def note_suggestion(note_id: int, promptType: PromptKind = "writing") -> SuggestResponse:
    try:
        result = _get_editor_session().request_suggestion(note_id, promptType)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Note not found") from exc
    return SuggestResponse(suggestion=result.suggestion, confidence=result.confidence)


@app.post("/api/notes/{note_id}/suggestion/accept", response_model=AcceptSuggestionResponse)
async def accept_suggestion(note_id: int, payload: AcceptSuggestionRequest) -> AcceptSuggestionResponse:
    try:
        accepted = _get_editor_session().accept_suggestion(note_id, payload.promptType, payload.suggestion)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Note not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return AcceptSuggestionResponse(
        promptType=payload.promptType,
        note=accepted.note,
        task=accepted.task,
        advisory=accepted.advisory_text,
    )
