"""
Note content boundary for the notes backend.

Design intent:
- Treat the persisted content string as a rich-text document tree.
- Never fail on legacy or malformed content; fall back to a plain paragraph.
- Keep suggestion merging additive and deterministic.
"""
from .codec import decode_content, fallback_document, parse_content, serialize_content
from .extract import flatten
from .merge import insert_suggestion
from .nodes import Document, Heading, OpaqueBlock, OpaqueInline, Paragraph, TextRun

__all__ = [
    "Document",
    "Heading",
    "OpaqueBlock",
    "OpaqueInline",
    "Paragraph",
    "TextRun",
    "decode_content",
    "fallback_document",
    "flatten",
    "insert_suggestion",
    "parse_content",
    "serialize_content",
]
