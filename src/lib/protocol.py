"""
mdBook preprocessor protocol

mdBook runs a preprocessor twice per build:

    mdbook-svgbob supports <renderer>   exit status 0 = run me, 1 = skip me
    mdbook-svgbob                       [context, book] JSON on stdin,
                                        processed book JSON on stdout

This module reads and writes those payloads and checks the calling
mdBook's version against the version this package was built for.
"""

import json
from typing import Any, Dict, TextIO, Tuple

import semantic_version
from pydantic import ValidationError

from ..models.book import PreprocessorContext
from .errors import ProtocolError, VersionError


def payload_read(stream: TextIO) -> Tuple[PreprocessorContext, Dict[str, Any]]:
    """
    Read the [context, book] pair mdBook writes to a preprocessor's stdin

    Args:
        stream: Text stream holding the JSON payload

    Returns:
        (context, book) where book is the raw book JSON object

    Raises:
        ProtocolError: If the payload is not valid JSON or not shaped
                       like [context, book]
    """
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Unable to parse the input: {e}") from e

    if not isinstance(payload, list) or len(payload) != 2:
        raise ProtocolError("Expected a JSON array of [context, book]")

    raw_context, book = payload
    try:
        context = PreprocessorContext.model_validate(raw_context)
    except ValidationError as e:
        raise ProtocolError(f"Invalid preprocessor context: {e}") from e

    if not isinstance(book, dict):
        raise ProtocolError("Expected the book to be a JSON object")

    return context, book


def payload_write(book: Dict[str, Any], stream: TextIO) -> None:
    """Write the processed book JSON, the only thing that may ever go to stdout"""
    json.dump(book, stream, ensure_ascii=False)
    stream.flush()


def version_isCompatible(host_version: str, built_version: str) -> bool:
    """
    Check the calling mdBook's version against the one we were built for

    Compatible means equal, or matched by the tilde range ~built_version
    (same major.minor, patch at least as high).

    Args:
        host_version: mdbook_version from the preprocessor context
        built_version: Version this preprocessor targets

    Returns:
        True if compatible

    Raises:
        VersionError: If either version cannot be parsed

    Example:
        >>> version_isCompatible("0.4.42", "0.4.40")
        True
        >>> version_isCompatible("0.5.0", "0.4.40")
        False
    """
    try:
        current = semantic_version.Version(host_version)
    except ValueError as e:
        raise VersionError(f"Invalid mdbook version '{host_version}': {e}") from e

    try:
        built = semantic_version.NpmSpec(f"~{built_version}")
    except ValueError as e:
        raise VersionError(f"Invalid version range '~{built_version}': {e}") from e

    return host_version == built_version or built.match(current)
