"""
svgbob renderer

Turns ASCII diagram source into SVG by running the svgbob command line
tool (cargo install svgbob_cli). The diagram goes in on stdin, the SVG
comes back on stdout.

The SVG is wrapped in <div class="svgbob">...</div> with its blank lines
removed. A line starting with <div opens a raw HTML block that only ends
at a blank line, so the whole drawing is read back as one block whatever
tags it contains (svgbob output carries a <style> section).
"""

import subprocess
from typing import Callable, Dict, List, Optional

from ..config import appsettings
from ..models.book import BobSettings
from .errors import RenderError
from .log import LOG

# Renderer signature used by the block tracker
Renderer = Callable[[str, BobSettings], str]

# BobSettings field -> svgbob command line flag
SETTINGS_FLAGS: Dict[str, str] = {
    "font_size": "--font-size",
    "font_family": "--font-family",
    "fill_color": "--fill-color",
    "background": "--background",
    "stroke_width": "--stroke-width",
    "scale": "--scale",
}


def render_command(settings: BobSettings, executable: Optional[str] = None) -> List[str]:
    """
    Build the svgbob command line for the given settings

    Only settings that were explicitly configured become flags; everything
    else is left to svgbob's defaults.

    Args:
        settings: Renderer settings
        executable: svgbob executable, defaults to appsettings.svgbob_bin

    Returns:
        Argument list for subprocess

    Example:
        >>> render_command(BobSettings(scale=2), "svgbob")
        ['svgbob', '--scale', '2.0']
    """
    command = [executable or appsettings.svgbob_bin]
    for field_name, flag in SETTINGS_FLAGS.items():
        value = getattr(settings, field_name)
        if value is not None:
            command.extend([flag, str(value)])
    return command


def svg_wrap(svg: str) -> str:
    """Wrap SVG text so it forms one raw HTML block"""
    lines = [line for line in svg.strip().splitlines() if line.strip()]
    body = "\n".join(lines)
    return f'<div class="svgbob">{body}</div>'


def bob_render(source: str, settings: BobSettings) -> str:
    """
    Render svgbob diagram source to embeddable markup

    Args:
        source: ASCII diagram text (the body of a ```bob block)
        settings: Renderer settings

    Returns:
        SVG wrapped in <div class="svgbob">

    Raises:
        RenderError: If svgbob is missing, times out, or exits non-zero
    """
    command = render_command(settings)
    LOG(f"Rendering {len(source)} characters with {' '.join(command)}", level=3)

    try:
        completed = subprocess.run(
            command,
            input=source,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=appsettings.render_timeout,
            check=True,
        )
    except FileNotFoundError as e:
        raise RenderError(
            f"svgbob executable '{command[0]}' not found. "
            "Install it with `cargo install svgbob_cli` or set MDBOOK_SVGBOB_SVGBOB_BIN"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise RenderError(f"svgbob did not finish within {appsettings.render_timeout}s") from e
    except subprocess.CalledProcessError as e:
        raise RenderError(f"svgbob exited with status {e.returncode}: {(e.stderr or '').strip()}") from e

    return svg_wrap(completed.stdout)
