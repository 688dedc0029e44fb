"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable, TextIO, TYPE_CHECKING
from dataclasses import dataclass, field
import sys

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .book import PreprocessorContext, ChapterResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the preprocessing pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as preprocessing progresses.

    Pipeline stages and their state additions:
        - Initial: verbosity, stdin, stdout
        - input_read: context, book
        - version_check: versionOK
        - book_process: book (content replaced), chapterResults
        - output_write: (no additions, terminal stage)

    Attributes:
        verbosity: Logging verbosity level (1-3)
        stdin: Stream the host payload is read from
        stdout: Stream the processed book is written to
        context: Parsed preprocessor context (mdBook version, config, renderer)
        book: Book JSON as received, then as processed
        versionOK: True if the host version is inside the compatible range
        chapterResults: Per-chapter outcomes from the book walk
    """

    # CLI arguments
    verbosity: int = field(default=1)
    stdin: TextIO = field(default=sys.stdin)
    stdout: TextIO = field(default=sys.stdout)

    # Pipeline state
    context: Optional["PreprocessorContext"] = field(default=None)
    book: Optional[Dict[str, Any]] = field(default=None)
    versionOK: bool = field(default=False)
    chapterResults: List["ChapterResult"] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, **streams: TextIO
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and I/O streams.

        Args:
            options: Parsed CLI arguments (verbosity, ...)
            **streams: Optional stdin/stdout overrides

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that exist as ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, **streams}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            input_read,
            version_check,
            book_process,
            output_write
        )

    This is equivalent to:
        output_write(book_process(version_check(input_read(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
