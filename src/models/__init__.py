"""
Models package for mdbook-svgbob

Contains data structures and type definitions for the preprocessing pipeline.
"""

from .state import ProgramState, pipeline
from .events import (
    BOB_TAG,
    BlockKind,
    TrackerState,
    Event,
    StartBlock,
    EndBlock,
    Text,
    StartInline,
    EndInline,
    RawMarkup,
    Passthrough,
)
from .book import BobSettings, PreprocessorContext, ChapterResult

__all__ = [
    "ProgramState",
    "pipeline",
    "BOB_TAG",
    "BlockKind",
    "TrackerState",
    "Event",
    "StartBlock",
    "EndBlock",
    "Text",
    "StartInline",
    "EndInline",
    "RawMarkup",
    "Passthrough",
    "BobSettings",
    "PreprocessorContext",
    "ChapterResult",
]
