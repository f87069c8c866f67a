"""Backend selection: native renderer first (when enabled), rule-based fallback second."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import ComponentUnavailable, FallbackRenderError
from ..models.config import ConversionConfig, get_config
from ..models.result import Backend, ConversionResult
from .fallback import FallbackRenderer
from .native import NativeRenderer
from .postprocess import postprocess
from .protocols import ErrorReporter, MarkdownBackend, MarkdownRenderer, NullErrorReporter

logger = logging.getLogger(__name__)


class MarkdownService:
    """
    Converts HTML to Markdown, choosing a backend per call.

    1. Empty input returns an empty result without touching any backend.
    2. If the native renderer is enabled it is tried first. A missing library
       is logged as a warning; any other failure is reported to the error
       reporter and logged as an error. Either way the call falls through.
    3. The rule-based renderer runs. If it fails too the result is empty.

    convert() never raises.

    Example:
        service = MarkdownService(ConversionConfig(use_native_renderer=True))
        result = await service.convert(html)
        print(result.backend, result.markdown)
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        reporter: Optional[ErrorReporter] = None,
        native: Optional[MarkdownBackend] = None,
        fallback: Optional[MarkdownRenderer] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Conversion settings (process config from the environment if None)
            reporter: Receives unexpected backend errors (dropped if None)
            native: Native backend (built from config on first use if None)
            fallback: Rule-based renderer (built from config if None)
        """
        self._config = config or get_config()
        self._reporter = reporter or NullErrorReporter()
        self._native = native
        self._fallback = fallback or FallbackRenderer.from_config(self._config)

    @property
    def config(self) -> ConversionConfig:
        return self._config

    @property
    def native(self) -> MarkdownBackend:
        if self._native is None:
            self._native = NativeRenderer.from_config(self._config)
        return self._native

    def _report(self, error: BaseException) -> None:
        try:
            self._reporter.capture_exception(error)
        except Exception as e:
            logger.warning(f"Error reporter failed: {e}")

    async def _convert_native(self, html: str) -> Optional[str]:
        """Try the native renderer; None means fall back."""
        try:
            markdown = await self.native.convert(html)
            return postprocess(markdown)
        except ComponentUnavailable as e:
            logger.warning(
                f"Native renderer is enabled but not installed at {e.library_path}; using fallback renderer",
                extra={"library_path": str(e.library_path)},
            )
        except Exception as e:
            self._report(e)
            logger.error(f"Error converting HTML to Markdown with native renderer: {e}")
        return None

    def _convert_fallback(self, html: str) -> ConversionResult:
        try:
            markdown = self._fallback.render(html)
            return ConversionResult(markdown=postprocess(markdown), backend=Backend.FALLBACK)
        except FallbackRenderError as e:
            logger.error(f"Error converting HTML to Markdown: {e}")
            return ConversionResult.failed(str(e))
        except Exception as e:
            logger.error(f"Unexpected error converting HTML to Markdown: {e}")
            return ConversionResult.failed(str(e))

    async def convert(self, html: Optional[str]) -> ConversionResult:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content (None or "" yields an empty result)

        Returns:
            ConversionResult; never raises
        """
        if not html:
            return ConversionResult.empty()

        if self._config.use_native_renderer:
            markdown = await self._convert_native(html)
            if markdown is not None:
                return ConversionResult(markdown=markdown, backend=Backend.NATIVE)

        result = self._convert_fallback(html)
        logger.debug(f"Converted {len(html)} bytes of HTML with {result.backend.value} backend")
        return result


_service: Optional[MarkdownService] = None


def get_service() -> MarkdownService:
    """Return the process-wide service, configured from the environment."""
    global _service
    if _service is None:
        _service = MarkdownService()
    return _service


def configure(
    config: Optional[ConversionConfig] = None,
    reporter: Optional[ErrorReporter] = None,
) -> MarkdownService:
    """Replace the process-wide service (e.g. to install an error reporter at startup)."""
    global _service
    _service = MarkdownService(config=config, reporter=reporter)
    return _service


async def convert_html_to_markdown(html: Optional[str]) -> ConversionResult:
    """Convert HTML with the process-wide service, returning the full result."""
    return await get_service().convert(html)


async def parse_markdown(html: Optional[str]) -> str:
    """
    Convert HTML to Markdown.

    Returns "" for empty input and when every backend failed; never raises.
    """
    try:
        result = await convert_html_to_markdown(html)
    except Exception as e:
        logger.error(f"Error setting up HTML to Markdown conversion: {e}")
        return ""
    return result.markdown
