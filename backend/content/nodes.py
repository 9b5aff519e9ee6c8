from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class TextRun:
    text: str
    marks: tuple[dict[str, Any], ...] = ()
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueInline:
    """Inline node kept verbatim (hard breaks, mentions, inline images)."""

    kind: str
    payload: dict[str, Any] = field(default_factory=dict)
    children: tuple["Inline", ...] = ()


Inline = Union[TextRun, OpaqueInline]


@dataclass(frozen=True)
class Paragraph:
    children: tuple[Inline, ...] = ()
    attrs: dict[str, Any] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[Inline, ...] = ()
    attrs: dict[str, Any] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueBlock:
    """
    Block node whose internals are not interpreted (lists, task lists, code, images).

    `payload` holds every key other than `type` and `content`; `children` holds the
    decoded `content` so text inside lists still reaches the extractor.
    """

    kind: str
    payload: dict[str, Any] = field(default_factory=dict)
    children: tuple["Node", ...] = ()


Block = Union[Paragraph, Heading, OpaqueBlock]
Node = Union[Paragraph, Heading, OpaqueBlock, TextRun, OpaqueInline]


@dataclass(frozen=True)
class Document:
    children: tuple[Block, ...] = ()
