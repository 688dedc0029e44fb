"""
Host-facing data models

Typed views of what mdBook hands a preprocessor: the invocation context,
the renderer settings taken from book.toml, and the per-chapter outcome
recorded by the book walker.

The book itself stays plain JSON (dicts and lists) so that fields this
package does not know about survive the round trip untouched.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _hyphenate(field_name: str) -> str:
    """book.toml keys are conventionally kebab-case"""
    return field_name.replace("_", "-")


class BobSettings(BaseModel):
    """
    Renderer settings from the [preprocessor.svgbob] table

    Every field maps one-to-one onto an svgbob option. A field left unset
    means "use svgbob's own default", so BobSettings() is the default when
    the book has no configuration at all.

    Keys may be written either way (font-size or font_size). Keys mdBook
    itself uses in the table (command, renderers, before, after) are ignored.

    Example:
        [preprocessor.svgbob]
        font-size = 16
        stroke-width = 1.5
        background = "transparent"
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=_hyphenate,
    )

    font_size: Optional[int] = Field(default=None, description="Text font size")
    font_family: Optional[str] = Field(default=None, description="Text font family")
    fill_color: Optional[str] = Field(default=None, description="Fill color for solid shapes")
    background: Optional[str] = Field(default=None, description="Backdrop color")
    stroke_width: Optional[float] = Field(default=None, description="Line width")
    scale: Optional[float] = Field(default=None, description="Scale factor for the whole drawing")


class PreprocessorContext(BaseModel):
    """
    First element of the [context, book] pair mdBook writes to stdin

    Attributes:
        root: Book root directory
        config: Parsed book.toml
        renderer: Name of the renderer this build targets (e.g. "html")
        mdbook_version: Version of the calling mdBook
    """

    model_config = ConfigDict(extra="allow")

    root: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)
    renderer: str = ""
    mdbook_version: str


@dataclass
class ChapterResult:
    """
    Outcome of processing a single chapter

    Attributes:
        name: Chapter title
        path: Chapter source path relative to src/, None for draft chapters
        ok: True if the chapter content was replaced
        content: New content when ok, original content otherwise
        error: Failure description when not ok
    """
    name: str
    path: Optional[str]
    ok: bool
    content: str
    error: Optional[str] = None
