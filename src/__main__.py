#!/usr/bin/env python3
"""
mdbook-svgbob - svgbob diagrams for mdBook

An mdBook preprocessor that finds fenced code blocks tagged `bob` and
replaces them with the SVG rendered by svgbob:

    ```bob
    +------+     +------+
    | book |---->| html |
    +------+     +------+
    ```

Enable it in book.toml:

    [preprocessor.svgbob]
    font-size = 14
    stroke-width = 2

Usage:
    mdbook-svgbob                      read [context, book] from stdin,
                                       write the processed book to stdout
    mdbook-svgbob supports <renderer>  exit 0 if the renderer is supported

Both forms are normally invoked by mdBook itself, not by hand.
"""

import sys
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List, Optional

from .config import appsettings
from .lib import __version__, LOG, state_connectToLogger
from .lib.errors import MdbookSvgbobError
from .lib.log import LOG_warning
from .lib.preprocessor import Bob
from .lib.protocol import payload_read, payload_write, version_isCompatible
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    prog="mdbook-svgbob",
    description="mdbook-svgbob - mdBook preprocessor rendering ```bob blocks with svgbob",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase log verbosity on stderr (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

subparsers = parser.add_subparsers(dest="command")

supports_parser = subparsers.add_parser(
    "supports",
    help="Check whether a renderer is supported by this preprocessor",
    formatter_class=ArgumentDefaultsHelpFormatter,
)
supports_parser.add_argument("renderer", type=str, help="Renderer name (e.g. html)")


def fatal(message: str) -> None:
    """Report a fatal error on stderr and exit without writing a book"""
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def input_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the [context, book] payload from stdin.

    Args:
        inputstate: Initial program state with stdin set

    Returns:
        ProgramState with added fields:
            - context: PreprocessorContext
            - book: Book JSON object

    Exits:
        1 if the payload is malformed
    """
    state = inputstate.copy()

    LOG("Reading preprocessor input...", level=2)
    try:
        state.context, state.book = payload_read(state.stdin)
    except MdbookSvgbobError as e:
        fatal(str(e))

    LOG(f"Renderer: {state.context.renderer}, mdbook {state.context.mdbook_version}", level=2)
    return state


def version_check(inputstate: ProgramState) -> ProgramState:
    """
    Compare the calling mdBook's version with the one we were built for.

    A mismatch is only a warning; processing always continues.

    Args:
        inputstate: Program state with context set

    Returns:
        ProgramState with added field:
            - versionOK: True if the versions are compatible

    Exits:
        1 if either version string cannot be parsed
    """
    state = inputstate.copy()

    try:
        state.versionOK = version_isCompatible(state.context.mdbook_version, appsettings.mdbook_version)
    except MdbookSvgbobError as e:
        fatal(str(e))

    if not state.versionOK:
        LOG_warning(
            f"The svgbob plugin was built against version {appsettings.mdbook_version} of mdbook, "
            f"but we're being called from version {state.context.mdbook_version}, so may be incompatible."
        )
    return state


def book_process(inputstate: ProgramState) -> ProgramState:
    """
    Render the diagrams of every chapter.

    Args:
        inputstate: Program state with context and book set

    Returns:
        ProgramState with:
            - book: chapters' content replaced where processing succeeded
            - chapterResults: per-chapter outcomes

    Exits:
        1 if the [preprocessor.svgbob] configuration is invalid
    """
    state = inputstate.copy()

    bob = Bob()
    try:
        state.book = bob.run(state.context, state.book)
    except MdbookSvgbobError as e:
        fatal(str(e))

    state.chapterResults = bob.results
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the processed book to stdout (terminal pipeline stage).

    Args:
        inputstate: Program state with the processed book

    Returns:
        ProgramState unchanged
    """
    state = inputstate.copy()
    payload_write(state.book, state.stdout)
    LOG("Book written", level=2)
    return state


def supports(renderer: str) -> None:
    """Answer mdBook's `supports <renderer>` query through the exit status"""
    sys.exit(0 if Bob().supports_renderer(renderer) else 1)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point.

    With `supports <renderer>` answers the renderer query, otherwise runs
    the preprocessing pipeline:
        1. input_read: Parse [context, book] from stdin
        2. version_check: Warn on mdBook version mismatch
        3. book_process: Render diagrams chapter by chapter
        4. output_write: Write the book to stdout

    Args:
        argv: Command line arguments, sys.argv[1:] when None
    """
    options: Namespace = parser.parse_args(argv)

    if options.command == "supports":
        supports(options.renderer)

    state: ProgramState = ProgramState.state_createFromNamespace(
        options, stdin=sys.stdin, stdout=sys.stdout
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, input_read, version_check, book_process, output_write)


if __name__ == "__main__":
    main()
