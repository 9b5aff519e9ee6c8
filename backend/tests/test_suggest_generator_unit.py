import pytest

from backend.internal_core.config import load_config
from backend.suggest.generator import (
    NO_SUGGESTION_TEXT,
    UNAVAILABLE_TEXT,
    SuggestionResult,
    build_prompt,
    generate_suggestion,
    parse_suggestion_reply,
)


def test_build_prompt_writing_includes_title_and_text() -> None:
    prompt = build_prompt("writing", "Some notes", note_title="Trip")
    assert 'note titled "Trip"' in prompt
    assert "Some notes" in prompt
    assert '"suggestion": "your suggestion text here"' in prompt


def test_build_prompt_task_lists_existing_tasks() -> None:
    prompt = build_prompt("task", "Body", existing_tasks=["Book hotel", "Pack"])
    assert "Existing tasks:\nBook hotel\nPack" in prompt
    assert 'note titled "Untitled Note"' in prompt
    assert "No tasks yet." in build_prompt("task", "Body")


def test_build_prompt_structure_and_unknown_kind() -> None:
    assert "document structure expert" in build_prompt("structure", "Body")
    with pytest.raises(ValueError):
        build_prompt("poem", "Body")  # type: ignore[arg-type]


def test_parse_suggestion_reply_extracts_embedded_json() -> None:
    raw = 'Sure! Here you go:\n{"suggestion": "Add a summary {brief}", "confidence": 0.72}\nThanks'
    assert parse_suggestion_reply(raw) == SuggestionResult(suggestion="Add a summary {brief}", confidence=0.72)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", SuggestionResult(suggestion=NO_SUGGESTION_TEXT, confidence=0.5)),
        ('{"suggestion": "", "confidence": 0.9}', SuggestionResult(suggestion=NO_SUGGESTION_TEXT, confidence=0.9)),
        ('{"suggestion": "Go", "confidence": 0}', SuggestionResult(suggestion="Go", confidence=0.5)),
        ('{"suggestion": "Go", "confidence": "high"}', SuggestionResult(suggestion="Go", confidence=0.5)),
        ('{"suggestion": "Go", "confidence": 7}', SuggestionResult(suggestion="Go", confidence=1.0)),
    ],
)
def test_parse_suggestion_reply_defaults(raw: str, expected: SuggestionResult) -> None:
    assert parse_suggestion_reply(raw) == expected


def test_generate_suggestion_without_model_degrades(monkeypatch) -> None:
    monkeypatch.setenv("NOTES_LLM_MODEL_PATH", "")
    result = generate_suggestion("writing", "Body", config=load_config())
    assert result == SuggestionResult(suggestion=UNAVAILABLE_TEXT, confidence=0.0)


def test_generate_suggestion_missing_model_file_degrades(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("NOTES_LLM_MODEL_PATH", str(tmp_path / "missing.gguf"))
    result = generate_suggestion("task", "Body", note_title="T", existing_tasks=["a"])
    assert result.suggestion == UNAVAILABLE_TEXT
    assert result.confidence == 0.0


def test_generate_suggestion_uses_model_reply(monkeypatch) -> None:
    monkeypatch.setattr(
        "backend.suggest.generator._run_completion",
        lambda prompt, config: '{"suggestion": "Keep going", "confidence": 0.6}',
    )
    result = generate_suggestion("writing", "Body", config=load_config())
    assert result == SuggestionResult(suggestion="Keep going", confidence=0.6)
