"""
Semantic event model

Stable, library-independent representation of a parsed markdown chapter.
The parser translates markdown-it tokens into these events at the boundary,
the block tracker matches on them, and the serializer turns them back into
tokens. Nothing past the parser needs to know markdown-it's token layout.

Each event may carry the markdown-it Token it was translated from. The
token is excluded from equality so that two events describing the same
construct compare equal no matter where they came from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# Fence info string that marks a code block as svgbob source
BOB_TAG: str = "bob"


class BlockKind(Enum):
    """
    Kinds of block boundaries the tracker and serializer distinguish

    Code blocks get their own kinds because their body arrives as a Text
    event between the boundaries. Every other block (paragraph, heading,
    table, list, ...) is GENERIC and identified by its markdown-it name.
    """
    CODE_FENCED = "code_fenced"      # ```lang ... ```
    CODE_INDENTED = "code_indented"  # four-space indented code
    PARAGRAPH = "paragraph"
    GENERIC = "generic"


class TrackerState(Enum):
    """States of the tagged-block tracker"""
    IDLE = "idle"        # outside any recognized block
    OPEN = "open"        # tagged fence started, payload not yet seen
    CLOSING = "closing"  # payload consumed, waiting for the closing fence


@dataclass(frozen=True)
class StartBlock:
    """
    Start of a block-level construct

    Attributes:
        kind: Block kind
        name: markdown-it block name (e.g. "paragraph", "table", "fence")
        info: Fence info string for fenced code blocks, "" otherwise
        token: Source token, None for synthesized events
    """
    kind: BlockKind
    name: str = ""
    info: str = ""
    token: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class EndBlock:
    """End of a block-level construct, mirrors StartBlock"""
    kind: BlockKind
    name: str = ""
    info: str = ""
    token: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Text:
    """A run of literal text (inline text or a code block body)"""
    content: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class StartInline:
    """Start of an inline container ("inline") or inline span ("em", "strong", "link", ...)"""
    kind: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class EndInline:
    """End of an inline container or span"""
    kind: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RawMarkup:
    """Markup emitted verbatim, never escaped"""
    content: str


@dataclass(frozen=True)
class Passthrough:
    """Any token the tracker never inspects (hr, html, softbreak, code_inline, image, ...)"""
    kind: str
    token: Optional[Any] = field(default=None, compare=False, repr=False)


Event = Union[StartBlock, EndBlock, Text, StartInline, EndInline, RawMarkup, Passthrough]


def event_isBobStart(event: Event) -> bool:
    """True if event opens a fenced code block tagged as svgbob source"""
    return (
        isinstance(event, StartBlock)
        and event.kind is BlockKind.CODE_FENCED
        and event.info == BOB_TAG
    )


def event_isBobEnd(event: Event) -> bool:
    """True if event closes a fenced code block tagged as svgbob source"""
    return (
        isinstance(event, EndBlock)
        and event.kind is BlockKind.CODE_FENCED
        and event.info == BOB_TAG
    )
