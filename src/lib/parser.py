"""
Markdown to semantic events

Parses chapter text with markdown-it-py and translates the token stream
into the package's own event model (models.events).

The parser instance is configured the way mdformat configures its own, so
that the serializer can hand the rebuilt tokens straight to mdformat's
MDRenderer and get formatting-equivalent markdown back.

Translation rules:
    *_open / *_close (block)   → StartBlock / EndBlock
    fence                      → StartBlock(CODE_FENCED, info), Text(body), EndBlock(CODE_FENCED, info)
    code_block                 → StartBlock(CODE_INDENTED), Text(body), EndBlock(CODE_INDENTED)
    inline                     → StartInline("inline"), children..., EndInline("inline")
    *_open / *_close (inline)  → StartInline / EndInline
    text                       → Text
    anything else              → Passthrough

A code block with an empty body produces no Text event, just the two
boundaries.

Indented code is written back indented (IndentedCode below), not as the
fence mdformat would make of it.

Example:
    >>> document = document_parse("```bob\\n-->\\n```\\n")
    >>> [type(e).__name__ for e in document.events]
    ['StartBlock', 'Text', 'EndBlock']
    >>> document.events[0].info
    'bob'
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple

import mdformat.plugins
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdformat.renderer import MDRenderer, RenderContext, RenderTreeNode

from ..config import appsettings
from ..models.events import (
    BlockKind,
    EndBlock,
    EndInline,
    Event,
    Passthrough,
    StartBlock,
    StartInline,
    Text,
)
from .errors import ConfigError

# Options read by mdformat's renderers. "keep" leaves paragraph line breaks alone.
MDFORMAT_OPTIONS: Dict[str, Any] = {
    "wrap": "keep",
    "number": False,
    "end_of_line": "lf",
}


def _codeBlock_render(node: RenderTreeNode, context: RenderContext) -> str:
    """Write an indented code block back indented; mdformat's default is a fence"""
    lines = node.content.rstrip("\n").split("\n")
    return "\n".join(f"    {line}" if line else "" for line in lines)


class IndentedCode:
    """
    mdformat parser extension that keeps indented code indented

    Adds no syntax, only the code_block renderer, so that a chapter
    written back to markdown parses to the same code_block token.
    """

    RENDERERS = {"code_block": _codeBlock_render}
    POSTPROCESSORS: Dict[str, Any] = {}

    @staticmethod
    def update_mdit(mdit: MarkdownIt) -> None:
        pass


@dataclass
class Document:
    """
    One chapter as an ordered event sequence

    Attributes:
        events: Semantic events in document order
        env: markdown-it parse environment (holds link reference definitions,
             which the serializer needs to write them back)
        extensions: mdformat parser extensions the document was parsed with
    """
    events: List[Event]
    env: Dict[str, Any] = field(default_factory=dict)
    extensions: Tuple[str, ...] = ("tables",)


@lru_cache(maxsize=None)
def markdown_build(extensions: Tuple[str, ...]) -> MarkdownIt:
    """
    Build a markdown-it parser whose renderer writes markdown

    Args:
        extensions: Names of mdformat parser extensions (entry points in the
                    "mdformat.parser_extension" group, e.g. "tables")

    Returns:
        MarkdownIt instance using mdformat's MDRenderer

    Raises:
        ConfigError: If an extension is not installed
    """
    mdit = MarkdownIt("commonmark", renderer_cls=MDRenderer)
    mdit.options["mdformat"] = dict(MDFORMAT_OPTIONS)
    # Keep reference labels on link/image tokens so references survive
    mdit.options["store_labels"] = True
    mdit.options["parser_extension"] = [IndentedCode]
    mdit.options["codeformatters"] = {}

    for name in extensions:
        try:
            plugin = mdformat.plugins.PARSER_EXTENSIONS[name]
        except KeyError:
            raise ConfigError(
                f"Unknown markdown extension '{name}'. "
                f"Installed: {', '.join(sorted(mdformat.plugins.PARSER_EXTENSIONS)) or 'none'}"
            )
        if plugin not in mdit.options["parser_extension"]:
            mdit.options["parser_extension"].append(plugin)
            plugin.update_mdit(mdit)

    return mdit


def _token_name(token: Token) -> str:
    """'bullet_list_open' -> 'bullet_list'"""
    return token.type.rsplit("_", 1)[0]


def _blockKind_get(name: str) -> BlockKind:
    return BlockKind.PARAGRAPH if name == "paragraph" else BlockKind.GENERIC


def _code_toEvents(token: Token, kind: BlockKind, info: str) -> List[Event]:
    """Split a self-contained code token into start / body / end"""
    events: List[Event] = [StartBlock(kind, token.type, info, token=token)]
    if token.content:
        events.append(Text(token.content))
    events.append(EndBlock(kind, token.type, info, token=token))
    return events


def inline_toEvents(children: Sequence[Token]) -> List[Event]:
    """Translate the children of an inline token"""
    events: List[Event] = []
    for child in children:
        if child.type == "text":
            events.append(Text(child.content, token=child))
        elif child.nesting == 1:
            events.append(StartInline(_token_name(child), token=child))
        elif child.nesting == -1:
            events.append(EndInline(_token_name(child), token=child))
        else:
            events.append(Passthrough(child.type, token=child))
    return events


def tokens_toEvents(tokens: Sequence[Token]) -> List[Event]:
    """
    Translate a markdown-it block token stream into events

    Args:
        tokens: Output of MarkdownIt.parse()

    Returns:
        Flat list of events in document order
    """
    events: List[Event] = []
    for token in tokens:
        if token.type == "fence":
            events.extend(_code_toEvents(token, BlockKind.CODE_FENCED, token.info.strip()))
        elif token.type == "code_block":
            events.extend(_code_toEvents(token, BlockKind.CODE_INDENTED, ""))
        elif token.type == "inline":
            events.append(StartInline("inline", token=token))
            events.extend(inline_toEvents(token.children or []))
            events.append(EndInline("inline", token=token))
        elif token.nesting == 1:
            name = _token_name(token)
            events.append(StartBlock(_blockKind_get(name), name, token=token))
        elif token.nesting == -1:
            name = _token_name(token)
            events.append(EndBlock(_blockKind_get(name), name, token=token))
        else:
            events.append(Passthrough(token.type, token=token))
    return events


def document_parse(text: str, extensions: Optional[Sequence[str]] = None) -> Document:
    """
    Parse markdown text into a Document

    Args:
        text: Chapter markdown
        extensions: mdformat parser extensions, defaults to
                    appsettings.markdown_extensions (tables)

    Returns:
        Document with events and parse environment
    """
    names = tuple(extensions if extensions is not None else appsettings.markdown_extensions)
    mdit = markdown_build(names)
    env: Dict[str, Any] = {}
    tokens = mdit.parse(text, env)
    return Document(events=tokens_toEvents(tokens), env=env, extensions=names)
