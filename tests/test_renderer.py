"""
Renderer tests - svgbob command line and failure mapping

The subprocess is replaced by fakes; the real executable is exercised in
test_chapter_process.TestRealRenderer when it is installed.
"""

import subprocess

import pytest

from mdbook_svgbob.config import appsettings
from mdbook_svgbob.lib import renderer
from mdbook_svgbob.lib.errors import RenderError
from mdbook_svgbob.lib.preprocessor import settings_fromConfig
from mdbook_svgbob.lib.renderer import SETTINGS_FLAGS, bob_render, render_command, svg_wrap
from mdbook_svgbob.models.book import BobSettings


class TestCommand:
    """Test building the svgbob argument list"""

    def test_defaults_add_no_flags(self):
        """Unset settings are left to svgbob"""
        assert render_command(BobSettings(), "svgbob") == ["svgbob"]

    def test_executable_from_appsettings(self):
        assert render_command(BobSettings()) == [appsettings.svgbob_bin]

    def test_all_flags(self):
        """Each configured setting becomes one flag with its value"""
        settings = BobSettings(
            font_size=16,
            font_family="monospace",
            fill_color="black",
            background="transparent",
            stroke_width=1.5,
            scale=2,
        )
        command = render_command(settings, "svgbob")

        assert command == [
            "svgbob",
            "--font-size", "16",
            "--font-family", "monospace",
            "--fill-color", "black",
            "--background", "transparent",
            "--stroke-width", "1.5",
            "--scale", "2.0",
        ]


class TestRender:
    """Test running svgbob"""

    def test_output_wrapped(self, monkeypatch):
        """svgbob's stdout is wrapped in a svgbob <div> block"""
        calls = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs))
            return subprocess.CompletedProcess(command, 0, stdout="<svg><line/></svg>\n", stderr="")

        monkeypatch.setattr(renderer.subprocess, "run", fake_run)
        markup = bob_render("-->\n", BobSettings(scale=1.5))

        assert markup == '<div class="svgbob"><svg><line/></svg></div>'
        command, kwargs = calls[0]
        assert command[-2:] == ["--scale", "1.5"]
        assert kwargs["input"] == "-->\n"
        assert kwargs["timeout"] == appsettings.render_timeout

    def test_missing_executable(self, monkeypatch):
        """A missing svgbob is a render error"""
        monkeypatch.setattr(appsettings, "svgbob_bin", "svgbob-does-not-exist-anywhere")

        with pytest.raises(RenderError, match="not found"):
            bob_render("-->\n", BobSettings())

    def test_non_zero_exit(self, monkeypatch):
        """svgbob's stderr ends up in the error"""
        def fake_run(command, **kwargs):
            raise subprocess.CalledProcessError(2, command, output="", stderr="bad input\n")

        monkeypatch.setattr(renderer.subprocess, "run", fake_run)

        with pytest.raises(RenderError, match="status 2: bad input"):
            bob_render("-->\n", BobSettings())

    def test_timeout(self, monkeypatch):
        def fake_run(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs["timeout"])

        monkeypatch.setattr(renderer.subprocess, "run", fake_run)

        with pytest.raises(RenderError, match="did not finish"):
            bob_render("-->\n", BobSettings())


class TestWrap:
    """Test wrapping svgbob output into one raw HTML block"""

    def test_surrounding_whitespace_dropped(self):
        assert svg_wrap("\n<svg/>\n\n") == '<div class="svgbob"><svg/></div>'

    def test_blank_lines_removed(self):
        """A blank line would end the raw block early"""
        svg = "<svg>\n  <style>\n\n    line {}\n   \n  </style>\n  <defs/>\n</svg>\n"

        assert svg_wrap(svg) == (
            '<div class="svgbob"><svg>\n  <style>\n    line {}\n  </style>\n  <defs/>\n</svg></div>'
        )

    def test_indentation_kept(self):
        assert "\n    line {}\n" in svg_wrap("<svg>\n<style>\n    line {}\n</style>\n</svg>")


class TestUnsupportedOptions:
    """Test settings svgbob has no flag for"""

    def test_stroke_color_ignored(self):
        """stroke-color is not a svgbob option and never reaches the command line"""
        settings = settings_fromConfig({"preprocessor": {"svgbob": {"stroke-color": "red", "scale": 2}}})

        assert render_command(settings, "svgbob") == ["svgbob", "--scale", "2.0"]

    def test_flags_are_svgbob_options(self):
        assert set(SETTINGS_FLAGS.values()) == {
            "--font-size",
            "--font-family",
            "--fill-color",
            "--background",
            "--stroke-width",
            "--scale",
        }
