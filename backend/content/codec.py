from __future__ import annotations

"""
Decode and encode persisted note content.

Design intent:
- Persisted content is TipTap/ProseMirror JSON (`{"type": "doc", "content": [...]}`).
- Decoding returns an explicit result: a Document, or None when a fallback is needed.
- Parsing never raises; legacy plain-text notes become a single paragraph.
"""

import json
import logging
from typing import Any

from backend.content.nodes import (
    Block,
    Document,
    Heading,
    Inline,
    Node,
    OpaqueBlock,
    OpaqueInline,
    Paragraph,
    TextRun,
)

logger = logging.getLogger(__name__)

_HEADING_MIN_LEVEL = 1
_HEADING_MAX_LEVEL = 6

# Keys decoded into node fields; everything else rides along in `payload`.
_OPAQUE_KEYS = frozenset({"type", "content"})
_BLOCK_KEYS = frozenset({"type", "content", "attrs"})
_TEXT_KEYS = frozenset({"type", "text", "marks"})


def parse_content(raw: str | None) -> Document:
    """Return a Document with at least one block for any input string."""
    decoded = decode_content(raw)
    if decoded is None:
        logger.debug("content fallback applied chars=%d", len(raw or ""))
        return fallback_document(raw)
    if not decoded.children:
        return fallback_document("")
    return decoded


def fallback_document(raw: str | None) -> Document:
    return Document(children=(Paragraph(children=(TextRun(text=raw or ""),)),))


def decode_content(raw: str | None) -> Document | None:
    text = raw or ""
    if not text.strip():
        return None
    try:
        data = json.loads(text)
        return _decode_document(data)
    except (ValueError, RecursionError):
        return None


def serialize_content(doc: Document) -> str:
    payload = {
        "type": "doc",
        "content": [_encode_node(block) for block in doc.children],
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _decode_document(data: Any) -> Document | None:
    if not isinstance(data, dict) or data.get("type") != "doc":
        return None
    content = _content_list(data)
    if content is None:
        return None
    blocks: list[Block] = []
    for item in content:
        block = _decode_block(item)
        # Bare text is not a valid top-level block.
        if block is None or isinstance(block, (TextRun, OpaqueInline)):
            return None
        blocks.append(block)
    return Document(children=tuple(blocks))


def _decode_block(item: Any) -> Node | None:
    node_type = _node_type(item)
    if node_type is None:
        return None
    if node_type == "text":
        return _decode_text(item)
    if node_type == "paragraph":
        attrs = _attrs(item)
        children = _decode_inline_children(item)
        if attrs is None or children is None:
            return None
        return Paragraph(children=children, attrs=attrs, payload=_payload(item, _BLOCK_KEYS))
    if node_type == "heading":
        attrs = _attrs(item)
        children = _decode_inline_children(item)
        if attrs is None or children is None:
            return None
        rest = {key: value for key, value in attrs.items() if key != "level"}
        return Heading(
            level=_coerce_level(attrs.get("level")),
            children=children,
            attrs=rest,
            payload=_payload(item, _BLOCK_KEYS),
        )

    content = _content_list(item)
    if content is None:
        return None
    children: list[Node] = []
    for child in content:
        decoded = _decode_block(child)
        if decoded is None:
            return None
        children.append(decoded)
    return OpaqueBlock(kind=node_type, payload=_payload(item), children=tuple(children))


def _decode_inline(item: Any) -> Inline | None:
    node_type = _node_type(item)
    if node_type is None:
        return None
    if node_type == "text":
        return _decode_text(item)
    children = _decode_inline_children(item)
    if children is None:
        return None
    return OpaqueInline(kind=node_type, payload=_payload(item), children=children)


def _decode_inline_children(item: dict[str, Any]) -> tuple[Inline, ...] | None:
    content = _content_list(item)
    if content is None:
        return None
    children: list[Inline] = []
    for child in content:
        decoded = _decode_inline(child)
        if decoded is None:
            return None
        children.append(decoded)
    return tuple(children)


def _decode_text(item: dict[str, Any]) -> TextRun | None:
    text = item.get("text")
    if not isinstance(text, str):
        return None
    marks = item.get("marks", [])
    if not isinstance(marks, list) or not all(isinstance(mark, dict) for mark in marks):
        return None
    return TextRun(text=text, marks=tuple(marks), payload=_payload(item, _TEXT_KEYS))


def _node_type(item: Any) -> str | None:
    if not isinstance(item, dict):
        return None
    node_type = item.get("type")
    if not isinstance(node_type, str) or not node_type:
        return None
    return node_type


def _content_list(item: dict[str, Any]) -> list[Any] | None:
    content = item.get("content", [])
    if not isinstance(content, list):
        return None
    return content


def _attrs(item: dict[str, Any]) -> dict[str, Any] | None:
    attrs = item.get("attrs", {})
    if attrs is None:
        return {}
    if not isinstance(attrs, dict):
        return None
    return dict(attrs)


def _payload(item: dict[str, Any], modeled: frozenset[str] = _OPAQUE_KEYS) -> dict[str, Any]:
    return {key: value for key, value in item.items() if key not in modeled}


def _coerce_level(value: Any) -> int:
    if isinstance(value, bool):
        return _HEADING_MIN_LEVEL
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        return _HEADING_MIN_LEVEL
    return max(_HEADING_MIN_LEVEL, min(_HEADING_MAX_LEVEL, value))


def _encode_node(node: Node) -> dict[str, Any]:
    if isinstance(node, TextRun):
        encoded: dict[str, Any] = {"type": "text", "text": node.text}
        if node.marks:
            encoded["marks"] = list(node.marks)
        encoded.update(node.payload)
        return encoded
    if isinstance(node, Paragraph):
        encoded = {"type": "paragraph"}
        if node.attrs:
            encoded["attrs"] = dict(node.attrs)
        encoded.update(node.payload)
    elif isinstance(node, Heading):
        encoded = {"type": "heading", "attrs": {"level": node.level, **node.attrs}}
        encoded.update(node.payload)
    elif isinstance(node, (OpaqueBlock, OpaqueInline)):
        encoded = {"type": node.kind, **node.payload}
    else:
        raise TypeError(f"Unsupported content node: {type(node).__name__}")
    if node.children:
        encoded["content"] = [_encode_node(child) for child in node.children]
    return encoded
