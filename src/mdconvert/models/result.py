"""Result type returned by the backend selector."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Backend(str, Enum):
    """Which backend produced a conversion result."""

    NATIVE = "native"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of a single HTML to Markdown conversion.

    parse_markdown() collapses this to a string; callers that need to tell
    "empty input" apart from "every backend failed" use this instead.

    Attributes:
        markdown: Post-processed Markdown ("" on empty input or failure)
        backend: Backend that produced the Markdown
        error: Message of the last backend failure, if the call failed
    """

    markdown: str
    backend: Backend
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True unless every attempted backend failed."""
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return not self.markdown

    @classmethod
    def empty(cls) -> "ConversionResult":
        return cls(markdown="", backend=Backend.NONE)

    @classmethod
    def failed(cls, error: str) -> "ConversionResult":
        return cls(markdown="", backend=Backend.NONE, error=error)
