from .config import NotesConfig, load_config
from .note_store import InMemoryNoteStore

__all__ = ["NotesConfig", "load_config", "InMemoryNoteStore"]
