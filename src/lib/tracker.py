"""
Block-state tracker

Single-pass filter over a chapter's events that replaces every
```bob fenced code block with rendered SVG.

Recognized pattern (whole triple, nothing less):

    StartBlock(CODE_FENCED, "bob")  →  StartBlock(paragraph)
    Text(diagram source)            →  RawMarkup(render(source, settings))
    EndBlock(CODE_FENCED, "bob")    →  EndBlock(paragraph)

The replacement boundaries are paragraph boundaries, not code block
boundaries: if they stayed code block boundaries the serializer would
write the SVG back out as the body of a code block.

States:
    IDLE     outside any recognized block
    OPEN     saw a bob fence start, holding it until the next event
    CLOSING  payload rendered, waiting for the bob fence end

Every (state, event) pair not listed above passes the event through
unchanged. The start event is held in OPEN so that a bob block with no
Text payload (an empty block) is released exactly as it came in and
stays an ordinary, unrendered code block. Multiple text events are not
concatenated.

Example:
    >>> tracker = BlockTracker(lambda source, settings: "<svg/>", BobSettings())
    >>> events = document_parse("```bob\\n-->\\n```\\n").events
    >>> [type(e).__name__ for e in tracker.events_transform(events)]
    ['StartBlock', 'RawMarkup', 'EndBlock']
"""

from typing import Iterable, Iterator, List, Optional

from ..models.book import BobSettings
from ..models.events import (
    BlockKind,
    EndBlock,
    Event,
    RawMarkup,
    StartBlock,
    Text,
    TrackerState,
    event_isBobEnd,
    event_isBobStart,
)
from .log import LOG
from .renderer import Renderer


class BlockTracker:
    """
    State machine recognizing tagged diagram blocks in an event stream

    One instance per document pass; the state is never shared between
    chapters.
    """

    def __init__(self, render: Renderer, settings: BobSettings) -> None:
        """
        Args:
            render: Diagram renderer, (source, settings) -> markup
            settings: Renderer settings passed through to render

        Attributes:
            state: Current TrackerState
            held: bob fence start waiting for its payload (OPEN only)
            rendered: Number of diagrams rendered so far
        """
        self.render = render
        self.settings = settings
        self.state = TrackerState.IDLE
        self.held: Optional[StartBlock] = None
        self.rendered = 0

    def event_feed(self, event: Event) -> List[Event]:
        """
        Consume one event and return the events to emit in its place

        Args:
            event: Next event from the parser

        Returns:
            Zero or more events, in order
        """
        LOG(f"event: {event!r} ({self.state.value})", level=3)

        if self.state is TrackerState.IDLE and event_isBobStart(event):
            self.held = event
            self.state = TrackerState.OPEN
            return []

        if self.state is TrackerState.OPEN and isinstance(event, Text):
            self.held = None
            self.state = TrackerState.CLOSING
            markup = self.render(event.content, self.settings)
            self.rendered += 1
            return [StartBlock(BlockKind.PARAGRAPH, "paragraph"), RawMarkup(markup)]

        if self.state is TrackerState.CLOSING and event_isBobEnd(event):
            self.state = TrackerState.IDLE
            return [EndBlock(BlockKind.PARAGRAPH, "paragraph")]

        if self.state is TrackerState.OPEN:
            # No payload: give the block back untouched
            held = self.held
            self.held = None
            self.state = TrackerState.IDLE
            return [held, event]

        return [event]

    def finish(self) -> List[Event]:
        """Flush a start event still held when the stream ends"""
        if self.state is TrackerState.OPEN and self.held is not None:
            held = self.held
            self.held = None
            self.state = TrackerState.IDLE
            return [held]
        return []

    def events_transform(self, events: Iterable[Event]) -> Iterator[Event]:
        """
        Run the tracker over a whole event sequence

        Args:
            events: Events in document order

        Yields:
            Transformed events in document order
        """
        for event in events:
            yield from self.event_feed(event)
        yield from self.finish()
