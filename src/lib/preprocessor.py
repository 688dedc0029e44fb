"""
svgbob preprocessor for mdBook

Walks every chapter of a book and replaces ```bob code blocks with SVG:

    chapter text → document_parse → BlockTracker → document_serialize → chapter text

A chapter that fails anywhere along that path keeps its original content;
the failure is logged with the chapter's name and path and the walk moves
on to the next chapter.

Example:
    >>> bob = Bob()
    >>> bob.supports_renderer("html")
    True
    >>> book = bob.run(context, book)
"""

from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from ..config import appsettings
from ..models.book import BobSettings, ChapterResult, PreprocessorContext
from .errors import ConfigError
from .log import LOG, LOG_error
from .parser import Document, document_parse, markdown_build
from .renderer import Renderer, bob_render
from .serializer import document_serialize
from .tracker import BlockTracker

# Renderer name mdBook can be told about for which this preprocessor must not run
UNSUPPORTED_RENDERER: str = "not-supported"


def chapter_process(
    content: str,
    settings: BobSettings,
    render: Optional[Renderer] = None,
    extensions: Optional[Sequence[str]] = None,
) -> str:
    """
    Find ```bob code blocks, render them and put the SVG in their place

    Args:
        content: Chapter markdown
        settings: Renderer settings
        render: Diagram renderer, bob_render when None
        extensions: mdformat parser extensions, defaults to appsettings

    Returns:
        New chapter markdown

    Raises:
        RenderError: If a diagram cannot be rendered
        SerializeError: If the transformed events cannot be written back
    """
    document = document_parse(content, extensions)
    tracker = BlockTracker(render or bob_render, settings)
    transformed = Document(
        events=list(tracker.events_transform(document.events)),
        env=document.env,
        extensions=document.extensions,
    )
    LOG(f"Rendered {tracker.rendered} diagram(s)", level=3)
    return document_serialize(transformed)


def settings_fromConfig(config: Dict[str, Any], name: str = "svgbob") -> BobSettings:
    """
    Map the [preprocessor.<name>] table of book.toml onto BobSettings

    Args:
        config: Parsed book.toml as received in the preprocessor context
        name: Preprocessor name

    Returns:
        BobSettings, defaults when the table is absent

    Raises:
        ConfigError: If the table is not a table or holds invalid values
    """
    table = config.get("preprocessor", {}).get(name)
    if table is None:
        return BobSettings()
    if not isinstance(table, dict):
        raise ConfigError(f"[preprocessor.{name}] must be a table")
    try:
        return BobSettings.model_validate(table)
    except ValidationError as e:
        raise ConfigError(f"Invalid [preprocessor.{name}] configuration: {e}") from e


def book_sections(book: Dict[str, Any]) -> List[Any]:
    """Top level book items; mdBook 0.4 calls them "sections", later versions "items" """
    if "sections" in book:
        return book["sections"]
    return book.get("items", [])


def chapters_walk(items: List[Any]) -> Iterator[Dict[str, Any]]:
    """
    Yield chapter objects in mdBook's for_each_mut order

    Sub-chapters come before their parent, siblings in book order.
    Separators and part titles are not chapters and are skipped.

    Args:
        items: List of BookItem JSON values

    Yields:
        The inner object of each {"Chapter": {...}} item, mutable in place
    """
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("Chapter"), dict):
            chapter = item["Chapter"]
            yield from chapters_walk(chapter.get("sub_items") or [])
            yield chapter


class Bob:
    """
    svgbob preprocessor for mdBook

    Holds the renderer and the results of the last run. Per-chapter
    failures never escape run().
    """

    def __init__(
        self,
        render: Optional[Renderer] = None,
        extensions: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Args:
            render: Diagram renderer, bob_render when None
            extensions: mdformat parser extensions, defaults to appsettings

        Attributes:
            results: ChapterResult per chapter from the last run()
        """
        self.render = render
        self.extensions = tuple(extensions if extensions is not None else appsettings.markdown_extensions)
        self.results: List[ChapterResult] = []

    def name(self) -> str:
        return "svgbob"

    def supports_renderer(self, renderer: str) -> bool:
        """Run for every renderer except the "not-supported" sentinel"""
        return renderer != UNSUPPORTED_RENDERER

    def chapter_run(self, chapter: Dict[str, Any], settings: BobSettings) -> ChapterResult:
        """
        Process one chapter, replacing its content only on success

        Args:
            chapter: Chapter JSON object (name, content, path, ...)
            settings: Renderer settings

        Returns:
            ChapterResult describing what happened
        """
        name = chapter.get("name", "")
        path = chapter.get("path")
        original = chapter.get("content") or ""

        try:
            content = chapter_process(original, settings, self.render, self.extensions)
        except Exception as e:
            LOG_error(f"chapter '{name}' ({path}) left unchanged: {e}")
            return ChapterResult(name=name, path=path, ok=False, content=original, error=str(e))

        chapter["content"] = content
        LOG(f"chapter '{name}' processed", level=2)
        return ChapterResult(name=name, path=path, ok=True, content=content)

    def run(self, context: PreprocessorContext, book: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process every chapter of the book

        Args:
            context: Preprocessor context from mdBook
            book: Book JSON, modified in place

        Returns:
            The same book object

        Raises:
            ConfigError: If the configuration or markdown extensions are
                         invalid (raised before any chapter is touched)
        """
        settings = settings_fromConfig(context.config, self.name())
        markdown_build(self.extensions)

        self.results = [
            self.chapter_run(chapter, settings)
            for chapter in chapters_walk(book_sections(book))
        ]

        failed = sum(1 for result in self.results if not result.ok)
        LOG(f"Processed {len(self.results)} chapter(s), {failed} failed", level=1)
        return book
