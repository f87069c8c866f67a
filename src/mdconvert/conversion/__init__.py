"""HTML to Markdown conversion: backends, backend selection and post-processing."""

from .fallback import DEFAULT_IMAGE_ALT, DEFAULT_RULES, FallbackRenderer, RenderRule, RuleBasedConverter
from .images import (
    is_lazy_image,
    needs_resolution,
    normalize_image,
    normalize_lazy_images,
    resolve_image_src,
    strip_lazy_params,
)
from .native import NativeLibraryLoader, NativeRenderer, get_loader
from .postprocess import (
    LinkBracketState,
    escape_multiline_links,
    postprocess,
    remove_skip_to_content_links,
)
from .protocols import ErrorReporter, MarkdownBackend, MarkdownRenderer, NullErrorReporter
from .selector import MarkdownService, configure, convert_html_to_markdown, get_service, parse_markdown

__all__ = [
    # Protocols
    "ErrorReporter",
    "MarkdownBackend",
    "MarkdownRenderer",
    "NullErrorReporter",
    # Lazy images
    "is_lazy_image",
    "needs_resolution",
    "normalize_image",
    "normalize_lazy_images",
    "resolve_image_src",
    "strip_lazy_params",
    # Backends
    "DEFAULT_IMAGE_ALT",
    "DEFAULT_RULES",
    "FallbackRenderer",
    "RenderRule",
    "RuleBasedConverter",
    "NativeLibraryLoader",
    "NativeRenderer",
    "get_loader",
    # Post-processing
    "LinkBracketState",
    "escape_multiline_links",
    "remove_skip_to_content_links",
    "postprocess",
    # Selection
    "MarkdownService",
    "configure",
    "convert_html_to_markdown",
    "get_service",
    "parse_markdown",
]
