"""Rule-based HTML to Markdown renderer (used when the native renderer is off or broken)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from bs4 import Tag
from markdownify import ATX, UNDERLINED, MarkdownConverter

from ..errors import FallbackRenderError
from ..models.config import ConversionConfig, LinkStyle
from .images import needs_resolution, resolve_image_src

DEFAULT_IMAGE_ALT = "图片"

# Tags whose content never belongs in the Markdown output
DISCARDED_TAGS = frozenset({"script", "style", "noscript", "template"})

_HEADING_STYLES = {"atx": ATX, "setext": UNDERLINED}


@dataclass(frozen=True)
class RenderRule:
    """
    A (filter, replacement) pair consulted before the default tag handlers.

    Attributes:
        name: Rule identifier (for logging and tests)
        tags: Tag names the rule can apply to
        filter: Called with (node, converter); the rule applies if it returns True
        replacement: Called with (content, node, converter); returns the Markdown
            fragment that replaces the node. content is the already converted
            Markdown of the node's children.
    """

    name: str
    tags: frozenset[str]
    filter: Callable[[Tag, "RuleBasedConverter"], bool]
    replacement: Callable[[str, Tag, "RuleBasedConverter"], str]


def _is_lazy_image(node: Tag, converter: RuleBasedConverter) -> bool:
    return needs_resolution(node)


def _lazy_image(content: str, node: Tag, converter: RuleBasedConverter) -> str:
    src = resolve_image_src(node)
    if not src.strip():
        return ""
    alt = node.get("alt") or DEFAULT_IMAGE_ALT
    title = node.get("title") or ""
    if title:
        return f'![{alt}]({src} "{title}")'
    return f"![{alt}]({src})"


def _has_no_src(node: Tag, converter: RuleBasedConverter) -> bool:
    return not str(node.get("src") or "").strip()


def _is_inline_link(node: Tag, converter: RuleBasedConverter) -> bool:
    return converter.link_style == LinkStyle.INLINED and bool(node.get("href"))


def _inline_link(content: str, node: Tag, converter: RuleBasedConverter) -> str:
    href = str(node.get("href")).strip()
    title = f' "{node["title"]}"' if node.get("title") else ""
    # The trailing newline is part of the output format; consumers rely on it.
    return f"[{content.strip()}]({href}{title})\n"


def _is_referenced_link(node: Tag, converter: RuleBasedConverter) -> bool:
    return converter.link_style == LinkStyle.REFERENCED and bool(node.get("href"))


def _referenced_link(content: str, node: Tag, converter: RuleBasedConverter) -> str:
    index = converter.add_reference(str(node.get("href")).strip(), node.get("title"))
    return f"[{content.strip()}][{index}]"


def _discard(content: str, node: Tag, converter: RuleBasedConverter) -> str:
    return ""


DEFAULT_RULES: tuple[RenderRule, ...] = (
    RenderRule("discard", DISCARDED_TAGS, lambda node, converter: True, _discard),
    RenderRule("lazy_image", frozenset({"img"}), _is_lazy_image, _lazy_image),
    RenderRule("missing_src_image", frozenset({"img"}), _has_no_src, _discard),
    RenderRule("inline_link", frozenset({"a"}), _is_inline_link, _inline_link),
    RenderRule("referenced_link", frozenset({"a"}), _is_referenced_link, _referenced_link),
)


class RuleBasedConverter(MarkdownConverter):
    """
    markdownify converter that consults a list of RenderRules before its own
    convert_<tag> handlers.

    One instance converts one document: referenced links accumulate on it.
    """

    def __init__(
        self,
        rules: tuple[RenderRule, ...] = DEFAULT_RULES,
        link_style: LinkStyle = LinkStyle.INLINED,
        **options: Any,
    ):
        super().__init__(**options)
        self.rules = rules
        self.link_style = link_style
        self.references: list[str] = []

    def add_reference(self, href: str, title: Optional[str] = None) -> int:
        """Register a link definition and return its 1-based index."""
        definition = f'{href} "{title}"' if title else href
        self.references.append(definition)
        return len(self.references)

    def get_conv_fn(self, tag_name: str) -> Optional[Callable[..., str]]:
        default_fn = super().get_conv_fn(tag_name)
        if not self.should_convert_tag(tag_name.lower()):
            return default_fn

        rules = [rule for rule in self.rules if tag_name.lower() in rule.tags]
        if not rules:
            return default_fn

        def convert_with_rules(el: Tag, text: str, parent_tags: set[str]) -> str:
            # Code blocks keep their text verbatim
            if "_noformat" in parent_tags:
                return text
            for rule in rules:
                if rule.filter(el, self):
                    return rule.replacement(text, el, self)
            if default_fn is None:
                return text
            return default_fn(el, text, parent_tags=parent_tags)

        return convert_with_rules


class FallbackRenderer:
    """
    Converts HTML to Markdown by walking the parsed document tree.

    Uses markdownify's tag handlers (GitHub-flavored tables included) with
    custom rules for lazy-loaded images and inline links.

    Example:
        renderer = FallbackRenderer()
        markdown = renderer.render("<h1>Title</h1><p>Body</p>")
    """

    def __init__(
        self,
        link_style: LinkStyle = LinkStyle.INLINED,
        heading_style: str = "atx",
        rules: tuple[RenderRule, ...] = DEFAULT_RULES,
    ):
        """
        Initialize the renderer.

        Args:
            link_style: Inline [text](url) or referenced [text][n] links
            heading_style: "atx" (# Title) or "setext" (underlined)
            rules: Custom rules, consulted in order before the defaults
        """
        self._link_style = LinkStyle(link_style)
        self._rules = rules
        self._options: dict[str, Any] = {
            "heading_style": _HEADING_STYLES[heading_style],
            "bullets": "*",
            "newline_style": "backslash",
            "escape_misc": False,
            "code_language": "",
        }

    @classmethod
    def from_config(cls, config: ConversionConfig) -> FallbackRenderer:
        return cls(link_style=config.link_style, heading_style=config.heading_style)

    def _clean_output(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))

        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        if not markdown.strip():
            return ""

        # Ensure single newline at end
        return markdown.strip() + "\n"

    def render(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string

        Returns:
            Markdown string

        Raises:
            FallbackRenderError: If the document cannot be converted
        """
        try:
            converter = RuleBasedConverter(
                rules=self._rules,
                link_style=self._link_style,
                **self._options,
            )
            markdown = converter.convert(html)

            if converter.references:
                definitions = "\n".join(
                    f"[{index}]: {definition}" for index, definition in enumerate(converter.references, 1)
                )
                markdown = f"{markdown.rstrip()}\n\n{definitions}\n"

            return self._clean_output(markdown)

        except Exception as e:
            raise FallbackRenderError(f"Failed to convert HTML to Markdown: {e}", cause=e) from e
