"""
mdbook-svgbob - svgbob diagrams for mdBook

An mdBook preprocessor that renders ```bob fenced code blocks to inline SVG.
"""

from .lib import __version__, Bob, chapter_process, LOG, state_connectToLogger

__all__ = ["Bob", "chapter_process", "LOG", "state_connectToLogger", "__version__"]
