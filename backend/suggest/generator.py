from __future__ import annotations

"""
Generate AI suggestions for a note through a local GGUF model.

Design intent:
- Keep prompt construction per suggestion kind in one place.
- Accept loose model output; pull the first JSON object from the reply.
- Never raise into the editor flow; degrade to a fixed apology message.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Sequence

from backend.internal_core.config import NotesConfig, load_config
from backend.internal_core.contracts import PromptKind

logger = logging.getLogger(__name__)

NO_SUGGESTION_TEXT = "No suggestion available at this time."
UNAVAILABLE_TEXT = "Unable to generate a suggestion at this time. Please try again later."
DEFAULT_CONFIDENCE = 0.5

_REPLY_FORMAT = (
    "Respond in the following JSON format:\n"
    "{{\n"
    '  "suggestion": "{placeholder}",\n'
    '  "confidence": 0.9\n'
    "}}\n"
    "Where confidence is a number between 0 and 1 indicating how confident you are in the suggestion."
)


class SuggestionGenerationError(RuntimeError):
    """Raised internally when the suggestion model cannot produce a reply."""


@dataclass(frozen=True)
class SuggestionResult:
    suggestion: str
    confidence: float


def generate_suggestion(
    prompt_kind: PromptKind,
    current_text: str,
    note_title: str | None = None,
    existing_tasks: Sequence[str] | None = None,
    *,
    config: NotesConfig | None = None,
) -> SuggestionResult:
    try:
        prompt = build_prompt(
            prompt_kind,
            current_text,
            note_title=note_title,
            existing_tasks=existing_tasks,
        )
        raw = _run_completion(prompt, config or load_config())
    except (SuggestionGenerationError, ValueError) as exc:
        logger.warning("suggestion generation failed kind=%s error=%s", prompt_kind, exc)
        return SuggestionResult(suggestion=UNAVAILABLE_TEXT, confidence=0.0)
    return parse_suggestion_reply(raw)


def build_prompt(
    prompt_kind: PromptKind,
    current_text: str,
    *,
    note_title: str | None = None,
    existing_tasks: Sequence[str] | None = None,
) -> str:
    title = note_title or "Untitled Note"
    if prompt_kind == "writing":
        return (
            "You are a helpful AI writing assistant. Provide a concise continuation or suggestion "
            "for the current text. Keep suggestions under 100 words and make them contextually relevant.\n\n"
            f'Here is the current text in a note titled "{title}":\n\n{current_text}\n\n'
            "Suggest a relevant and helpful continuation or addition to this text.\n\n"
            + _REPLY_FORMAT.format(placeholder="your suggestion text here")
        )
    if prompt_kind == "task":
        tasks_block = "\n".join(existing_tasks or []) or "No tasks yet."
        return (
            "You are a helpful task management assistant. Based on the existing content and tasks, "
            "suggest a relevant new task that would be helpful to add. Keep task suggestions concise "
            "and actionable.\n\n"
            f'Here is the current note titled "{title}" with the following content:\n\n{current_text}\n\n'
            f"Existing tasks:\n{tasks_block}\n\nSuggest a relevant new task.\n\n"
            + _REPLY_FORMAT.format(placeholder="your task suggestion here")
        )
    if prompt_kind == "structure":
        return (
            "You are a document structure expert. Suggest how to better organize or structure the "
            "current note. Provide a concise suggestion on headings, sections, or organizational "
            "improvements.\n\n"
            f'Here is the current text in a note titled "{title}":\n\n{current_text}\n\n'
            "Suggest a way to better structure or organize this note.\n\n"
            + _REPLY_FORMAT.format(placeholder="your structure suggestion here")
        )
    raise ValueError(f"Unsupported prompt kind: {prompt_kind}")


def parse_suggestion_reply(raw: str) -> SuggestionResult:
    data = _parse_json_object(raw) or {}
    suggestion = data.get("suggestion")
    if not isinstance(suggestion, str) or not suggestion.strip():
        suggestion = NO_SUGGESTION_TEXT
    confidence = data.get("confidence")
    try:
        confidence_value = float(confidence) if confidence else DEFAULT_CONFIDENCE
    except (TypeError, ValueError):
        confidence_value = DEFAULT_CONFIDENCE
    return SuggestionResult(
        suggestion=suggestion.strip(),
        confidence=max(0.0, min(1.0, confidence_value)),
    )


def _run_completion(prompt: str, config: NotesConfig) -> str:
    model_path = config.NOTES_LLM_MODEL_PATH.strip()
    if not model_path:
        raise SuggestionGenerationError(
            "Suggestion model path is missing. Set NOTES_LLM_MODEL_PATH or place "
            "suggestion-model.gguf under models/."
        )
    if not os.path.exists(model_path):
        raise SuggestionGenerationError(f"Suggestion model file not found: {model_path}")

    try:
        from llama_cpp import Llama  # type: ignore
    except Exception as exc:
        raise SuggestionGenerationError(f"llama_cpp import failed: {exc}") from exc

    llm_kwargs: dict[str, Any] = {
        "model_path": model_path,
        "n_ctx": int(config.NOTES_LLM_N_CTX),
        "n_gpu_layers": int(config.NOTES_LLM_N_GPU_LAYERS),
        "verbose": False,
        "chat_format": config.NOTES_LLM_CHAT_FORMAT,
    }
    try:
        try:
            llm = Llama(**llm_kwargs)
        except TypeError as exc:
            if "chat_format" not in str(exc):
                raise
            llm_kwargs.pop("chat_format", None)
            llm = Llama(**llm_kwargs)
        response = llm.create_chat_completion(
            messages=[{"role": "user", "content": prompt}],
            temperature=float(config.NOTES_LLM_TEMPERATURE),
            max_tokens=int(config.NOTES_LLM_MAX_TOKENS),
        )
        return str(response["choices"][0]["message"]["content"] or "").strip()
    except Exception as exc:
        raise SuggestionGenerationError(f"Suggestion model call failed: {exc}") from exc


def _parse_json_object(raw: str) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        data = json.loads(raw)
        if isinstance(data, dict):
            return data
    except ValueError:
        pass

    extracted = _extract_first_json_object(raw)
    if not extracted:
        return None
    try:
        data = json.loads(extracted)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _extract_first_json_object(text: str) -> str:
    start = text.find("{")
    if start < 0:
        return ""
    depth = 0
    in_str = False
    escape = False
    for i, ch in enumerate(text[start:], start=start):
        if in_str:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return ""
