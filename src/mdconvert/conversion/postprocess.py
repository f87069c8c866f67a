"""Text transforms applied to every backend's Markdown output."""

import re
from dataclasses import dataclass
from typing import Callable

SKIP_TO_CONTENT_PATTERN = re.compile(r"\[Skip to Content\]\(#[^)]*\)", re.IGNORECASE)


@dataclass
class LinkBracketState:
    """Bracket depth while scanning Markdown; depth > 0 means inside link text."""

    depth: int = 0

    def feed(self, char: str) -> None:
        if char == "[":
            self.depth += 1
        elif char == "]":
            self.depth = max(0, self.depth - 1)

    @property
    def inside_link(self) -> bool:
        return self.depth > 0


def escape_multiline_links(markdown: str) -> str:
    """
    Escape newlines inside link text so the link stays one logical line.

    Every newline seen while at least one "[" is open becomes a backslash
    followed by the newline (a Markdown hard line break). Brackets are
    counted literally: escaped brackets and brackets inside code spans count
    too.
    """
    if "[" not in markdown:
        return markdown

    state = LinkBracketState()
    parts: list[str] = []
    for char in markdown:
        state.feed(char)
        if char == "\n" and state.inside_link:
            parts.append("\\\n")
        else:
            parts.append(char)
    return "".join(parts)


def remove_skip_to_content_links(markdown: str) -> str:
    """Remove [Skip to Content](#...) navigation links, case-insensitively."""
    return SKIP_TO_CONTENT_PATTERN.sub("", markdown)


# Applied in order
POST_PROCESSORS: tuple[Callable[[str], str], ...] = (
    escape_multiline_links,
    remove_skip_to_content_links,
)


def postprocess(markdown: str) -> str:
    """Run every post-processor over raw backend output."""
    for processor in POST_PROCESSORS:
        markdown = processor(markdown)
    return markdown
