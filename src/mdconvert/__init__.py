"""
mdconvert - Convert real-world HTML into clean Markdown.

Usage:
    import asyncio
    from mdconvert import parse_markdown

    markdown = asyncio.run(parse_markdown("<h1>Hello</h1>"))

    # Or with explicit settings and the full result
    from mdconvert import ConversionConfig, MarkdownService

    service = MarkdownService(ConversionConfig(use_native_renderer=True))
    result = await service.convert(html)
"""

__version__ = "1.0.0"

from .conversion import (
    FallbackRenderer,
    MarkdownService,
    NativeRenderer,
    configure,
    convert_html_to_markdown,
    parse_markdown,
)
from .errors import (
    ComponentUnavailable,
    ConversionError,
    FallbackRenderError,
    NativeConversionError,
    RenderFailure,
)
from .models import Backend, ConversionConfig, ConversionResult, LinkStyle, get_config

__all__ = [
    "__version__",
    # Core
    "parse_markdown",
    "convert_html_to_markdown",
    "configure",
    "MarkdownService",
    "FallbackRenderer",
    "NativeRenderer",
    # Config
    "ConversionConfig",
    "LinkStyle",
    "get_config",
    # Results
    "Backend",
    "ConversionResult",
    # Errors
    "ConversionError",
    "ComponentUnavailable",
    "NativeConversionError",
    "FallbackRenderError",
    "RenderFailure",
]
