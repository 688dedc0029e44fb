"""
mdbook-svgbob - svgbob diagrams for mdBook

Renders ```bob fenced code blocks in mdBook chapters to inline SVG.
"""

__version__ = "0.2.0"

from .parser import Document, document_parse
from .serializer import document_serialize
from .tracker import BlockTracker
from .renderer import bob_render
from .preprocessor import Bob, chapter_process
from .log import LOG, state_connectToLogger

__all__ = [
    "Document",
    "document_parse",
    "document_serialize",
    "BlockTracker",
    "bob_render",
    "Bob",
    "chapter_process",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
