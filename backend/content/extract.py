from __future__ import annotations

"""
Flatten note content into plain text for prompts and search.

Depth-first, pre-order; only TextRun leaves contribute text. Link targets and
other node attributes are never emitted.
"""

import logging
from typing import Iterator

from backend.content.codec import decode_content
from backend.content.nodes import (
    Document,
    Heading,
    Node,
    OpaqueBlock,
    OpaqueInline,
    Paragraph,
    TextRun,
)

logger = logging.getLogger(__name__)


def flatten(content: Document | str | None) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        decoded = decode_content(content)
        if decoded is None:
            return content
        content = decoded
    try:
        return join_text_pieces(_iter_text(content))
    except (TypeError, AttributeError, RecursionError) as exc:
        logger.warning("flatten skipped malformed content tree: %s", exc)
        return ""


def join_text_pieces(pieces: Iterator[str] | list[str]) -> str:
    """
    Join leaf texts with a single space.

    No separator is added where either side already has whitespace at the
    boundary, so an amended run ("Hello ") followed by "world" reads "Hello world".
    """
    out: list[str] = []
    previous = ""
    for piece in pieces:
        if not piece:
            continue
        if previous and not previous[-1].isspace() and not piece[0].isspace():
            out.append(" ")
        out.append(piece)
        previous = piece
    return "".join(out)


def _iter_text(node: Document | Node) -> Iterator[str]:
    if isinstance(node, TextRun):
        yield node.text
        return
    if isinstance(node, (Document, Paragraph, Heading, OpaqueBlock, OpaqueInline)):
        for child in node.children:
            yield from _iter_text(child)
        return
    raise TypeError(f"Unsupported content node: {type(node).__name__}")
