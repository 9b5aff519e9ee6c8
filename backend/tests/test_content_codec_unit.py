import json

import pytest

from backend.content import (
    Document,
    Heading,
    OpaqueBlock,
    OpaqueInline,
    Paragraph,
    TextRun,
    decode_content,
    parse_content,
    serialize_content,
)


_RICH_CONTENT = json.dumps(
    {
        "type": "doc",
        "content": [
            {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "Plan"}]},
            {
                "type": "paragraph",
                "attrs": {"textAlign": "left"},
                "content": [
                    {"type": "text", "text": "Read "},
                    {
                        "type": "text",
                        "text": "the docs",
                        "marks": [{"type": "link", "attrs": {"href": "https://example.com"}}],
                    },
                    {"type": "hardBreak"},
                ],
            },
            {
                "type": "taskList",
                "content": [
                    {
                        "type": "taskItem",
                        "attrs": {"checked": False},
                        "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Ship it"}]}],
                    }
                ],
            },
        ],
    }
)


def test_parse_empty_string_yields_single_empty_paragraph() -> None:
    doc = parse_content("")
    assert doc == Document(children=(Paragraph(children=(TextRun(text=""),)),))


def test_parse_none_is_treated_as_empty() -> None:
    assert parse_content(None) == parse_content("")


def test_parse_plain_text_falls_back_to_paragraph() -> None:
    doc = parse_content("not json at all")
    assert len(doc.children) == 1
    paragraph = doc.children[0]
    assert isinstance(paragraph, Paragraph)
    assert paragraph.children == (TextRun(text="not json at all"),)


@pytest.mark.parametrize(
    "raw",
    [
        "123",
        "[1, 2]",
        '{"type": "paragraph"}',
        '{"type": "doc", "content": "oops"}',
        '{"type": "doc", "content": [{"type": "text", "text": "bare"}]}',
        '{"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text"}]}]}',
        '{"type": "doc", "content": [{"content": []}]}',
        '{"type": "doc", "content": [{"type": "paragraph", "attrs": "x"}]}',
        '{"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "a", "marks": "b"}]}]}',
        '{"type": "doc"',
    ],
)
def test_structurally_invalid_content_falls_back_to_raw_text(raw: str) -> None:
    assert decode_content(raw) is None
    doc = parse_content(raw)
    assert doc.children == (Paragraph(children=(TextRun(text=raw),)),)


def test_valid_document_without_blocks_gets_empty_paragraph() -> None:
    assert decode_content('{"type": "doc", "content": []}') == Document(children=())
    assert parse_content('{"type": "doc"}') == parse_content("")


def test_parse_rich_document_classifies_nodes() -> None:
    doc = parse_content(_RICH_CONTENT)
    heading, paragraph, task_list = doc.children

    assert isinstance(heading, Heading)
    assert heading.level == 2
    assert heading.children == (TextRun(text="Plan"),)

    assert isinstance(paragraph, Paragraph)
    assert paragraph.attrs == {"textAlign": "left"}
    assert paragraph.children[1].marks[0]["attrs"]["href"] == "https://example.com"
    assert paragraph.children[2] == OpaqueInline(kind="hardBreak")

    assert isinstance(task_list, OpaqueBlock)
    assert task_list.kind == "taskList"
    task_item = task_list.children[0]
    assert isinstance(task_item, OpaqueBlock)
    assert task_item.payload == {"attrs": {"checked": False}}
    assert task_item.children == (Paragraph(children=(TextRun(text="Ship it"),)),)


def test_serialize_preserves_opaque_payload_and_marks() -> None:
    serialized = serialize_content(parse_content(_RICH_CONTENT))
    assert json.loads(serialized) == json.loads(_RICH_CONTENT)


def test_extra_keys_on_paragraph_heading_and_text_survive_round_trip() -> None:
    source = {
        "type": "doc",
        "content": [
            {
                "type": "heading",
                "id": "h-1",
                "attrs": {"level": 2, "textAlign": "left"},
                "content": [{"type": "text", "text": "Plan"}],
            },
            {
                "type": "paragraph",
                "id": "p-1",
                "content": [{"type": "text", "text": "Hola", "attrs": {"lang": "es"}}],
            },
        ],
    }
    doc = parse_content(json.dumps(source))
    heading, paragraph = doc.children
    assert heading.payload == {"id": "h-1"}
    assert heading.attrs == {"textAlign": "left"}
    assert paragraph.payload == {"id": "p-1"}
    assert paragraph.children[0].payload == {"attrs": {"lang": "es"}}
    assert json.loads(serialize_content(doc)) == source


@pytest.mark.parametrize(
    "raw",
    ["", "plain legacy note", _RICH_CONTENT, '{"type": "doc", "content": []}', "{ broken"],
)
def test_parse_serialize_round_trip_is_fixed_point(raw: str) -> None:
    doc = parse_content(raw)
    assert len(doc.children) >= 1
    assert parse_content(serialize_content(doc)) == doc


@pytest.mark.parametrize(
    ("level", "expected"),
    [(0, 1), (9, 6), ("3", 3), (None, 1), (True, 1), (4, 4)],
)
def test_heading_level_is_clamped(level, expected) -> None:
    raw = json.dumps(
        {"type": "doc", "content": [{"type": "heading", "attrs": {"level": level}, "content": []}]}
    )
    heading = parse_content(raw).children[0]
    assert isinstance(heading, Heading)
    assert heading.level == expected


def test_serialize_is_compact_and_type_first() -> None:
    doc = Document(children=(Heading(level=1, children=(TextRun(text="Título"),)),))
    assert serialize_content(doc) == (
        '{"type":"doc","content":[{"type":"heading","attrs":{"level":1},'
        '"content":[{"type":"text","text":"Título"}]}]}'
    )


def test_deeply_nested_content_does_not_raise() -> None:
    raw = '{"type":"doc","content":[' + '{"type":"x","content":[' * 5000 + "]}" * 5000 + "]}"
    doc = parse_content(raw)
    assert len(doc.children) >= 1
