"""
End-to-end chapter tests

Tests the full pipeline on chapter text: markdown → events → tracker →
events → markdown, with a stub renderer and, when svgbob is installed,
with the real one.
"""

import shutil

import pytest

from mdbook_svgbob.config import appsettings
from mdbook_svgbob.lib.parser import document_parse
from mdbook_svgbob.lib.preprocessor import chapter_process
from mdbook_svgbob.lib.renderer import svg_wrap
from mdbook_svgbob.models.book import BobSettings
from mdbook_svgbob.models.events import RawMarkup, StartBlock


STUB_SVG = '<div class="svgbob"><svg><line x1="0"/><use href="#triangle"/><text>a|b</text></svg></div>'

# Shaped like svgbob's output: indented, multi-line, with a <style> section and blank lines
SVGBOB_OUTPUT = """<svg xmlns="http://www.w3.org/2000/svg" width="40" height="32">
  <style>
    line, path {
      stroke: black;
    }

    text {
      font-family: monospace;
    }
  </style>
  <defs>
    <marker id="triangle" viewBox="0 0 8 4">
      <polygon points="0,0 0,4 8,2 0,0"></polygon>
    </marker>
  </defs>

  <rect class="backdrop" x="0" y="0" width="40" height="32"></rect>
  <line x1="0" y1="8" x2="24" y2="8" class="solid" marker-end="url(#triangle)"></line>
</svg>
"""


class StubRenderer:
    """Renderer stub returning fixed markup and counting calls"""

    def __init__(self, markup=STUB_SVG):
        self.markup = markup
        self.sources = []

    def __call__(self, source, settings):
        self.sources.append(source)
        return self.markup


@pytest.fixture
def render():
    return StubRenderer()


class TestSingleBlock:
    """Test a chapter with one well-formed bob block"""

    def test_block_replaced_by_markup(self, render):
        """Rendered markup is inline and the fence is gone"""
        output = chapter_process("```bob\n-->\n```", BobSettings(), render)

        assert "<svg" in output
        assert "<line" in output
        assert "#triangle" in output
        assert "```" not in output
        assert render.sources == ["-->\n"]

    def test_surrounding_content_kept(self, render):
        """Text before and after the block is untouched"""
        source = "# Diagram\n\nBefore.\n\n```bob\n-->\n```\n\nAfter.\n"
        output = chapter_process(source, BobSettings(), render)

        assert output.startswith("# Diagram\n\nBefore.\n\n")
        assert output.endswith("\n\nAfter.\n")
        assert STUB_SVG in output

    def test_output_reparses_as_raw_html(self, render):
        """The markup is read back as one raw HTML block"""
        output = chapter_process("```bob\n-->\n```\n\nAfter.\n", BobSettings(), render)
        events = document_parse(output).events

        assert events[0].kind == "html_block"
        assert events[0].token.content.rstrip("\n") == STUB_SVG

    def test_multiline_markup_with_blank_lines(self):
        """Blank lines and a <style> section inside the SVG do not end the raw block"""
        markup = svg_wrap(SVGBOB_OUTPUT)
        output = chapter_process("```bob\n-->\n```\n\nAfter.\n", BobSettings(), StubRenderer(markup))
        events = document_parse(output).events

        assert events[0].kind == "html_block"
        assert events[0].token.content.rstrip("\n") == markup
        assert "  </style>\n  <defs>" in output
        assert output.endswith("</svg></div>\n\nAfter.\n")


class TestNoBlocks:
    """Test chapters without bob blocks"""

    @pytest.mark.parametrize(
        "source",
        [
            "Just a paragraph.\n",
            "# Heading\n\n- a\n- b\n\n```python\nprint(1)\n```\n",
            "| x | y |\n|---|---|\n| 1 | 2 |\n",
            "para\n\n    indented\n",
        ],
    )
    def test_formatting_equivalent(self, render, source):
        """Re-parsing input and output gives the same events"""
        output = chapter_process(source, BobSettings(), render)

        assert document_parse(output).events == document_parse(source).events
        assert render.sources == []


class TestIdempotence:
    """Test that a second run does not find anything to render"""

    def test_second_run_is_identity(self, render):
        """Running on the output gives the output"""
        source = "Intro\n\n```bob\n-->\n```\n\n```bob\n<--\n```\n"
        once = chapter_process(source, BobSettings(), render)
        twice = chapter_process(once, BobSettings(), render)

        assert twice == once
        assert len(render.sources) == 2

    def test_multiline_svg_second_run_is_identity(self):
        """svgbob-shaped output survives being read back unchanged"""
        render = StubRenderer(svg_wrap(SVGBOB_OUTPUT))
        source = "# Flow\n\n```bob\n-->\n```\n\n| a | b |\n|---|---|\n| 1 | 2 |\n"
        once = chapter_process(source, BobSettings(), render)
        twice = chapter_process(once, BobSettings(), render)

        assert twice == once
        assert render.sources == ["-->\n"]

    def test_indented_code_second_run_is_identity(self, render):
        source = "para\n\n    indented\n\n```bob\n-->\n```\n"
        once = chapter_process(source, BobSettings(), render)

        assert "\n    indented\n" in once
        assert chapter_process(once, BobSettings(), render) == once


class TestEmptyBlock:
    """Test a bob block with no diagram source"""

    def test_empty_block_left_as_code(self, render):
        """No text payload means no rendering"""
        output = chapter_process("```bob\n```\n", BobSettings(), render)

        assert output.startswith("```bob")
        assert "<svg" not in output
        assert render.sources == []

    def test_empty_block_then_paragraph(self, render):
        """The paragraph after an empty block is not treated as diagram source"""
        output = chapter_process("```bob\n```\n\nplain text\n", BobSettings(), render)

        assert "plain text" in output
        assert render.sources == []


class TestTables:
    """Test the interaction of tables and raw markup"""

    TABLE = "| a | b |\n|---|---|\n| 1 | 2 |\n"

    def test_table_below_block(self, render):
        """A table after a bob block is written exactly as without the block"""
        table_only = chapter_process(self.TABLE, BobSettings(), render)
        output = chapter_process("```bob\n-->\n```\n\n" + self.TABLE, BobSettings(), render)

        assert table_only.strip() in output
        assert "\\|" not in output

    def test_markup_pipes_not_escaped(self, render):
        """Pipes in the rendered markup stay as they are"""
        output = chapter_process("```bob\n-->\n```\n\n" + self.TABLE, BobSettings(), render)

        assert "<text>a|b</text>" in output

    def test_table_still_a_table(self, render):
        """Re-parsing the output finds the table and the raw block"""
        output = chapter_process("```bob\n-->\n```\n\n" + self.TABLE, BobSettings(), render)
        events = document_parse(output).events
        names = [e.name for e in events if isinstance(e, StartBlock)]

        assert "table" in names
        assert not any(isinstance(e, RawMarkup) for e in events)


@pytest.mark.skipif(shutil.which(appsettings.svgbob_bin) is None, reason="svgbob is not installed")
class TestRealRenderer:
    """Test against the svgbob executable"""

    def test_arrow(self):
        """An arrow renders to an SVG line with a triangle marker"""
        output = chapter_process("```bob\n-->\n```", BobSettings())

        assert "<svg" in output
        assert "<line" in output
        assert "#triangle" in output
