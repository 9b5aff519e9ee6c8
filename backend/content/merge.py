from __future__ import annotations

"""
Merge an accepted writing suggestion into note content.

Design intent:
- Append to the last top-level paragraph, the note's most current writing spot.
- Purely additive: at most one trailing space is amended onto an existing run.
- Rebuild the touched path instead of mutating the input tree.
"""

import logging
from dataclasses import replace
from typing import Any, Sequence

from backend.content.nodes import (
    Block,
    Document,
    Heading,
    OpaqueBlock,
    OpaqueInline,
    Paragraph,
    TextRun,
)

logger = logging.getLogger(__name__)


def insert_suggestion(doc: Document, suggestion: str) -> Document:
    """
    Return a new Document with `suggestion` appended.

    Not idempotent: accepting the same suggestion twice appends it twice.
    """
    if not _is_well_formed(doc):
        logger.warning("suggestion merge replaced malformed document type=%s", type(doc).__name__)
        return Document(children=(_suggestion_paragraph(suggestion),))

    blocks = list(doc.children)
    index = _last_paragraph_index(blocks)
    if index is None:
        blocks.append(_suggestion_paragraph(suggestion))
        return Document(children=tuple(blocks))

    target = blocks[index]
    inlines = list(target.children)
    if inlines:
        last = inlines[-1]
        if isinstance(last, TextRun) and _needs_trailing_space(last.text):
            inlines[-1] = replace(last, text=last.text + " ")
    inlines.append(TextRun(text=suggestion))
    blocks[index] = replace(target, children=tuple(inlines))
    return Document(children=tuple(blocks))


def _last_paragraph_index(blocks: Sequence[Block]) -> int | None:
    for index in range(len(blocks) - 1, -1, -1):
        if isinstance(blocks[index], Paragraph):
            return index
    return None


def _needs_trailing_space(text: str) -> bool:
    # Empty runs stay empty; there is no word to separate from.
    return bool(text) and not text[-1].isspace()


def _suggestion_paragraph(suggestion: str) -> Paragraph:
    return Paragraph(children=(TextRun(text=suggestion),))


def _is_well_formed(doc: Any) -> bool:
    if not isinstance(doc, Document) or not isinstance(doc.children, (tuple, list)):
        return False
    for block in doc.children:
        if not isinstance(block, (Paragraph, Heading, OpaqueBlock)):
            return False
        if isinstance(block, Paragraph):
            if not isinstance(block.children, (tuple, list)):
                return False
            if not all(isinstance(child, (TextRun, OpaqueInline)) for child in block.children):
                return False
    return True
