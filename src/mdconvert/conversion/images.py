"""Lazy-loaded image resolution.

Article feeds (WeChat public accounts in particular) ship <img> tags whose
src is an inline SVG placeholder and whose real URL lives in a data-*
attribute. Both rendering backends run every image through the functions in
this module so they agree on the URL that ends up in the Markdown.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Checked in order when src is a placeholder; first http(s) value wins
FALLBACK_SRC_ATTRIBUTES = (
    "data-backsrc",
    "data-fail-src",
    "data-failsrc",
    "data-original",
    "data-backupsrc",
)

LAZY_CLASS_MARKERS = ("rich_pages", "wxw-img")
LAZY_SRC_MARKERS = ("wx_fmt=", "mmbiz.qpic.cn")
PLACEHOLDER_SRC_PREFIX = "data:image/svg"

_LAZY_PARAM_PATTERNS = (
    re.compile(r"&wx_lazy=\d+"),
    re.compile(r"&wx_co=\d+"),
)


def _attr(node: Tag, name: str) -> Optional[str]:
    """Case-insensitive attribute lookup returning a string or None."""
    value = node.get(name)
    if value is None:
        for key, candidate in node.attrs.items():
            if key.lower() == name:
                value = candidate
                break
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def strip_lazy_params(url: str) -> str:
    """Remove lazy-load query fragments (&wx_lazy=N, &wx_co=N) from a URL."""
    for pattern in _LAZY_PARAM_PATTERNS:
        url = pattern.sub("", url)
    return url


def is_placeholder_src(src: Optional[str]) -> bool:
    """True if src is missing, blank or an inline SVG data URI."""
    if not src or not src.strip():
        return True
    return PLACEHOLDER_SRC_PREFIX in src


def is_lazy_image(node: Tag) -> bool:
    """
    Classify an <img> as a lazy-loaded, site-specific image.

    Any one of these signals is enough:
    - a data-src attribute is present
    - the class list contains a known marker
    - src contains a known CDN or format marker
    """
    if node.name != "img":
        return False

    if _attr(node, "data-src") is not None:
        return True

    class_name = _attr(node, "class") or ""
    if any(marker in class_name for marker in LAZY_CLASS_MARKERS):
        return True

    src = _attr(node, "src") or ""
    return any(marker in src for marker in LAZY_SRC_MARKERS)


def _fallback_src(node: Tag) -> Optional[str]:
    """First http(s) value among the fallback attributes, or None."""
    for name in FALLBACK_SRC_ATTRIBUTES:
        candidate = _attr(node, name)
        if candidate and candidate.startswith("http"):
            return candidate
    return None


def needs_resolution(node: Tag) -> bool:
    """
    True if the image's src may differ from the URL it should render with.

    Lazy images always qualify. Other images qualify only when src is a
    placeholder and a fallback attribute holds a real URL.
    """
    if node.name != "img":
        return False
    if is_lazy_image(node):
        return True
    return is_placeholder_src(_attr(node, "src")) and _fallback_src(node) is not None


def resolve_image_src(node: Tag) -> str:
    """
    Resolve the real URL of an image.

    Args:
        node: An <img> tag

    Returns:
        data-src if set, else the first http(s) fallback attribute when src is
        a placeholder, else src. Lazy-load query fragments are stripped.
    """
    data_src = _attr(node, "data-src")
    if data_src:
        return strip_lazy_params(data_src)

    src = _attr(node, "src") or ""
    if is_placeholder_src(src):
        src = _fallback_src(node) or src

    return strip_lazy_params(src)


def normalize_image(node: Tag) -> bool:
    """
    Rewrite an <img> tag's src in place with its resolved URL.

    Returns:
        True if the tag was modified
    """
    resolved = resolve_image_src(node)
    if not resolved or resolved == node.get("src"):
        return False
    node["src"] = resolved
    return True


def normalize_lazy_images(html: str) -> str:
    """
    Resolve lazy-loaded images across a whole HTML document.

    Used as a pre-pass before handing markup to the native renderer. Documents
    without images are returned untouched; so are documents whose images
    already carry their resolved URL, which makes the pass idempotent.
    """
    if "<img" not in html.lower():
        return html

    soup = BeautifulSoup(html, "html.parser")
    changed = 0
    for node in soup.find_all("img"):
        if needs_resolution(node) and normalize_image(node):
            changed += 1

    if not changed:
        return html

    logger.debug(f"Resolved {changed} lazy-loaded image(s)")
    return str(soup)
