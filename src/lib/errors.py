"""
Exception hierarchy for mdbook-svgbob

Fatal errors (ProtocolError, VersionError, ConfigError) abort the run before
any chapter is touched. Recoverable errors (RenderError, SerializeError) are
caught per chapter by the book walker, which keeps the chapter's original
content and moves on.
"""


class MdbookSvgbobError(Exception):
    """Base class for all errors raised by this package"""
    pass


class ProtocolError(MdbookSvgbobError):
    """Raised when the host payload on stdin is not a valid [context, book] pair"""
    pass


class VersionError(MdbookSvgbobError):
    """Raised when a version string or version range cannot be parsed"""
    pass


class ConfigError(MdbookSvgbobError):
    """Raised when the [preprocessor.svgbob] table or a markdown extension is invalid"""
    pass


class RenderError(MdbookSvgbobError):
    """Raised when svgbob cannot render a diagram"""
    pass


class SerializeError(MdbookSvgbobError):
    """Raised when an event stream cannot be turned back into markdown"""
    pass
