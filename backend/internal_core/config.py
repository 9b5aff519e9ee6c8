from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _project_root() -> Path:
    # backend/internal_core/config.py -> backend -> project
    return Path(__file__).resolve().parents[2]


def _resolve_existing_path_or_empty(candidates: list[Path]) -> str:
    for candidate in candidates:
        try:
            resolved = candidate.expanduser().resolve()
        except Exception:
            continue
        if resolved.exists():
            return str(resolved)
    return ""


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class NotesConfig:
    NOTES_LOG_LEVEL: str
    NOTES_DEFAULT_USER_ID: int
    NOTES_SEED_DEFAULTS: bool
    NOTES_LLM_MODEL_PATH: str
    NOTES_LLM_CHAT_FORMAT: str
    NOTES_LLM_MAX_TOKENS: int
    NOTES_LLM_TEMPERATURE: float
    NOTES_LLM_N_CTX: int
    NOTES_LLM_N_GPU_LAYERS: int


def load_config() -> NotesConfig:
    project_root = _project_root()
    default_model_path = _resolve_existing_path_or_empty(
        [
            base / "suggestion-model.gguf"
            for base in (project_root / "models", project_root, project_root.parent / "models")
        ]
    )

    return NotesConfig(
        NOTES_LOG_LEVEL=_getenv_str("NOTES_LOG_LEVEL", "INFO"),
        NOTES_DEFAULT_USER_ID=_getenv_int("NOTES_DEFAULT_USER_ID", 1),
        NOTES_SEED_DEFAULTS=_getenv_bool("NOTES_SEED_DEFAULTS", True),
        NOTES_LLM_MODEL_PATH=_getenv_str("NOTES_LLM_MODEL_PATH", default_model_path),
        NOTES_LLM_CHAT_FORMAT=_getenv_str("NOTES_LLM_CHAT_FORMAT", "gemma"),
        NOTES_LLM_MAX_TOKENS=_getenv_int("NOTES_LLM_MAX_TOKENS", 150),
        NOTES_LLM_TEMPERATURE=_getenv_float("NOTES_LLM_TEMPERATURE", 0.7),
        NOTES_LLM_N_CTX=_getenv_int("NOTES_LLM_N_CTX", 2048),
        NOTES_LLM_N_GPU_LAYERS=_getenv_int("NOTES_LLM_N_GPU_LAYERS", -1),
    )
