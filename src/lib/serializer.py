"""
Semantic events back to markdown

Rebuilds a markdown-it token stream from events and renders it with
mdformat's MDRenderer through the same parser instance the document was
parsed with.

Rebuilding rules:
    - Events that carry their source token give that token back. Text
      events give a copy with the (possibly new) content.
    - Code blocks are rebuilt from the start token plus the collected body.
    - RawMarkup becomes an html_block token at block level and an
      html_inline token inside an inline container. mdformat writes both
      verbatim, so raw markup is never escaped (pipes in an SVG stay pipes).
    - Paragraph boundaries without a source token are the ones the block
      tracker wraps around raw markup. They produce no token: an html_block
      is already a block of its own and mdformat separates blocks itself.
"""

from typing import Any, Dict, List, Optional

from markdown_it.token import Token

from ..models.events import (
    BlockKind,
    EndBlock,
    EndInline,
    Event,
    Passthrough,
    RawMarkup,
    StartBlock,
    StartInline,
    Text,
)
from .errors import SerializeError
from .parser import Document, markdown_build

CODE_KINDS = (BlockKind.CODE_FENCED, BlockKind.CODE_INDENTED)


def _codeToken_build(start: StartBlock, body: str) -> Token:
    """Code block token with the given body, from the start event's token if it has one"""
    if start.token is not None:
        return start.token.copy(content=body)
    if start.kind is BlockKind.CODE_FENCED:
        return Token("fence", "code", 0, content=body, info=start.info, markup="```", block=True)
    return Token("code_block", "code", 0, content=body, block=True)


def _inlineToken_build(event: Event) -> Token:
    """Child token of an inline container"""
    if isinstance(event, Text):
        if event.token is not None:
            return event.token.copy(content=event.content)
        return Token("text", "", 0, content=event.content)
    if isinstance(event, RawMarkup):
        return Token("html_inline", "", 0, content=event.content)
    if isinstance(event, StartInline):
        return event.token if event.token is not None else Token(f"{event.kind}_open", "", 1)
    if isinstance(event, EndInline):
        return event.token if event.token is not None else Token(f"{event.kind}_close", "", -1)
    if isinstance(event, Passthrough) and event.token is not None:
        return event.token
    raise SerializeError(f"{event!r} cannot appear inside inline content")


def _blockBoundary_build(event: Event) -> Optional[Token]:
    """Token for a non-code block boundary, None for synthesized paragraph boundaries"""
    if event.token is not None:
        return event.token
    if event.kind is BlockKind.PARAGRAPH:
        return None
    if isinstance(event, StartBlock):
        return Token(f"{event.name}_open", "", 1, block=True)
    return Token(f"{event.name}_close", "", -1, block=True)


def events_toTokens(events: List[Event]) -> List[Token]:
    """
    Rebuild a markdown-it block token stream from events

    Args:
        events: Event sequence, original or transformed

    Returns:
        Token list suitable for MDRenderer.render()

    Raises:
        SerializeError: If the events are not well nested (text outside a
                        block, unterminated code block or inline container)
    """
    tokens: List[Token] = []

    code_start: Optional[StartBlock] = None
    code_body: List[str] = []

    inline_token: Optional[Token] = None
    inline_children: List[Token] = []

    for event in events:
        if inline_token is not None:
            if isinstance(event, EndInline) and event.kind == "inline":
                tokens.append(inline_token.copy(children=inline_children))
                inline_token = None
                inline_children = []
            else:
                inline_children.append(_inlineToken_build(event))
            continue

        if code_start is not None:
            if isinstance(event, Text):
                code_body.append(event.content)
            elif isinstance(event, EndBlock) and event.kind is code_start.kind:
                tokens.append(_codeToken_build(code_start, "".join(code_body)))
                code_start = None
                code_body = []
            else:
                raise SerializeError(f"{event!r} inside a code block")
            continue

        if isinstance(event, StartBlock) and event.kind in CODE_KINDS:
            code_start = event
        elif isinstance(event, (StartBlock, EndBlock)):
            token = _blockBoundary_build(event)
            if token is not None:
                tokens.append(token)
        elif isinstance(event, StartInline) and event.kind == "inline":
            inline_token = event.token if event.token is not None else Token("inline", "", 0, block=True)
        elif isinstance(event, RawMarkup):
            content = event.content if event.content.endswith("\n") else event.content + "\n"
            tokens.append(Token("html_block", "", 0, content=content, block=True))
        elif isinstance(event, Passthrough) and event.token is not None:
            tokens.append(event.token)
        else:
            raise SerializeError(f"{event!r} outside of any block")

    if code_start is not None:
        raise SerializeError("Unterminated code block at end of document")
    if inline_token is not None:
        raise SerializeError("Unterminated inline content at end of document")

    return tokens


def document_serialize(document: Document) -> str:
    """
    Render a Document back to markdown

    Args:
        document: Parsed (and possibly transformed) document

    Returns:
        Markdown text
    """
    mdit = markdown_build(document.extensions)
    tokens = events_toTokens(document.events)
    # MDRenderer writes bookkeeping into env; keep the document's own copy clean
    env: Dict[str, Any] = dict(document.env)
    return mdit.renderer.render(tokens, mdit.options, env)
