"""
Error types raised by the editing engine.

All errors derive from EditorError so front ends can catch one type.
"""


class EditorError(Exception):
    """Base class for all engine errors."""


class NullImageError(EditorError):
    """An operation was requested without a loaded image."""

    def __init__(self, message: str = "No image loaded"):
        super().__init__(message)


class OutOfBoundsError(EditorError, IndexError):
    """Pixel coordinates fall outside the buffer dimensions."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"Pixel ({x}, {y}) is outside a {width}x{height} buffer"
        )


class UnsupportedFormatError(EditorError, ValueError):
    """Encode/decode was requested for an unrecognized image format."""

    def __init__(self, format_hint: str):
        self.format_hint = format_hint
        super().__init__(f"Unsupported image format: {format_hint!r}")


class HistoryUnderflowError(EditorError):
    """Revert was requested while the history is too shallow."""

    def __init__(self, depth: int, requested: int):
        self.depth = depth
        self.requested = requested
        super().__init__(
            f"Cannot revert {requested} step(s) with {depth} recorded state(s)"
        )


class UnknownFilterError(EditorError, LookupError):
    """No filter is registered under the requested id."""

    def __init__(self, filter_id: str):
        self.filter_id = filter_id
        super().__init__(f"Unknown filter: {filter_id!r}")


class FilterCancelledError(EditorError):
    """A filter pass was cancelled or timed out before completing."""


class CodecError(EditorError):
    """The image library failed to read or write pixel data."""
