"""Protocol definitions for conversion backends and error reporting."""

from typing import Protocol


class MarkdownBackend(Protocol):
    """
    Protocol for asynchronous HTML to Markdown backends.

    The native renderer implements this; tests substitute fakes.
    """

    async def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string

        Returns:
            Raw (not yet post-processed) Markdown string
        """
        ...


class MarkdownRenderer(Protocol):
    """
    Protocol for synchronous renderers used as the last-resort backend.
    """

    def render(self, html: str) -> str:
        """
        Render HTML to Markdown.

        Raises:
            FallbackRenderError: If the document cannot be rendered
        """
        ...


class ErrorReporter(Protocol):
    """
    Protocol for forwarding unexpected errors to an error-tracking service.

    Only unexpected failures are reported; a missing native library is not.
    """

    def capture_exception(self, error: BaseException) -> None:
        ...


class NullErrorReporter:
    """ErrorReporter that drops every report."""

    def capture_exception(self, error: BaseException) -> None:
        return None
