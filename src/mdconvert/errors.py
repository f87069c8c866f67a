"""Exception hierarchy for mdconvert.

Every error raised by a rendering backend derives from ConversionError so the
backend selector can classify it. None of these escape parse_markdown().
"""

from pathlib import Path
from typing import Optional, Union


class ConversionError(Exception):
    """Base exception for all HTML to Markdown conversion errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ComponentUnavailable(ConversionError):
    """Raised when the native renderer library is not installed on disk.

    This is an expected, operational condition: the selector falls back to
    the rule-based renderer and never reports it to telemetry.
    """

    def __init__(self, library_path: Union[str, Path]):
        super().__init__(f"Native renderer library not found: {library_path}")
        self.library_path = Path(library_path)


class NativeConversionError(ConversionError):
    """Raised when the native renderer fails, times out or cannot be loaded."""


class FallbackRenderError(ConversionError):
    """Raised when the rule-based renderer fails to walk the document."""


# Name used by callers that think of the fallback failure as a render failure
RenderFailure = FallbackRenderError
