"""Tests for lazy-loaded image resolution."""

from bs4 import BeautifulSoup
from mdconvert.conversion.images import (
    is_lazy_image,
    is_placeholder_src,
    needs_resolution,
    normalize_lazy_images,
    resolve_image_src,
    strip_lazy_params,
)

SVG_PLACEHOLDER = "data:image/svg+xml,%3Csvg%20xmlns=%27http://www.w3.org/2000/svg%27%3E%3C/svg%3E"


def img(markup: str):
    """Parse a single <img> tag."""
    return BeautifulSoup(markup, "html.parser").find("img")


def resolved_srcs(html: str) -> list:
    soup = BeautifulSoup(html, "html.parser")
    return [tag.get("src") for tag in soup.find_all("img")]


class TestStripLazyParams:
    """Tests for strip_lazy_params."""

    def test_strips_lazy_and_co_params(self):
        """Test removing both lazy-load parameters."""
        url = "https://mmbiz.qpic.cn/a/640?wx_fmt=png&wx_lazy=1&wx_co=1"
        assert strip_lazy_params(url) == "https://mmbiz.qpic.cn/a/640?wx_fmt=png"

    def test_strips_multi_digit_values(self):
        """Test parameters with multi-digit values."""
        assert strip_lazy_params("https://x.com/a?b=1&wx_lazy=12&c=2") == "https://x.com/a?b=1&c=2"

    def test_leaves_other_urls_alone(self):
        """Test that unrelated query strings are kept."""
        assert strip_lazy_params("https://example.com/a.png?w=200") == "https://example.com/a.png?w=200"


class TestClassification:
    """Tests for is_lazy_image and placeholder detection."""

    def test_data_src_marks_lazy(self):
        """Test that data-src marks an image as lazy."""
        assert is_lazy_image(img('<img data-src="https://x.com/a.png" src="https://x.com/b.png">'))

    def test_empty_data_src_still_marks_lazy(self):
        """Test that an empty data-src still counts."""
        assert is_lazy_image(img('<img data-src="" src="https://x.com/b.png">'))

    def test_class_marker_marks_lazy(self):
        """Test the class list markers."""
        assert is_lazy_image(img('<img class="rich_pages wxw-img" src="https://x.com/b.png">'))
        assert is_lazy_image(img('<img class="foo wxw-img" src="https://x.com/b.png">'))

    def test_src_marker_marks_lazy(self):
        """Test the CDN and format markers in src."""
        assert is_lazy_image(img('<img src="https://mmbiz.qpic.cn/abc/640">'))
        assert is_lazy_image(img('<img src="https://cdn.example.com/a?wx_fmt=jpeg">'))

    def test_plain_image_is_not_lazy(self):
        """Test that ordinary images are not lazy."""
        assert not is_lazy_image(img('<img src="https://example.com/a.png" class="hero">'))

    def test_placeholder_detection(self):
        """Test which src values count as placeholders."""
        assert is_placeholder_src(SVG_PLACEHOLDER)
        assert is_placeholder_src("")
        assert is_placeholder_src(None)
        assert not is_placeholder_src("https://example.com/a.png")

    def test_placeholder_with_fallback_needs_resolution(self):
        """Test that a placeholder backed by a fallback URL needs resolving."""
        assert needs_resolution(img(f'<img src="{SVG_PLACEHOLDER}" data-original="http://y.com/a.png">'))
        assert needs_resolution(img('<img data-backsrc="https://y.com/a.png">'))
        assert not needs_resolution(img('<img src="https://example.com/a.png">'))

    def test_placeholder_without_fallback_needs_no_resolution(self):
        """Test that placeholders with nothing to resolve to are left alone."""
        assert not needs_resolution(img('<img alt="logo">'))
        assert not needs_resolution(img('<img src="">'))
        assert not needs_resolution(img(f'<img src="{SVG_PLACEHOLDER}">'))
        assert not needs_resolution(img('<img srcset="a.png 1x" data-original="/relative.png">'))


class TestResolveImageSrc:
    """Tests for resolve_image_src."""

    def test_data_src_wins(self):
        """Test that data-src takes priority over src."""
        node = img('<img data-src="https://x.com/real.png&amp;wx_lazy=1" src="https://x.com/other.png">')
        assert resolve_image_src(node) == "https://x.com/real.png"

    def test_svg_placeholder_uses_data_original(self):
        """Test resolving an SVG placeholder from data-original."""
        node = img(f'<img src="{SVG_PLACEHOLDER}" data-original="http://y.com/photo.jpg">')
        assert resolve_image_src(node) == "http://y.com/photo.jpg"

    def test_fallback_attribute_priority(self):
        """Test the order in which fallback attributes are checked."""
        node = img(
            f'<img src="{SVG_PLACEHOLDER}" data-original="http://y.com/original.jpg" '
            'data-backsrc="http://y.com/back.jpg">'
        )
        assert resolve_image_src(node) == "http://y.com/back.jpg"

    def test_fallback_attribute_must_be_http(self):
        """Test that relative fallback values are skipped."""
        node = img(
            f'<img src="{SVG_PLACEHOLDER}" data-backsrc="/relative.jpg" '
            'data-fail-src="https://y.com/fail.jpg">'
        )
        assert resolve_image_src(node) == "https://y.com/fail.jpg"

    def test_backup_src_attribute_is_case_insensitive(self):
        """Test that mixed-case attribute names are found."""
        node = img(f'<img src="{SVG_PLACEHOLDER}" data-backupSrc="https://y.com/backup.jpg">')
        assert resolve_image_src(node) == "https://y.com/backup.jpg"

    def test_placeholder_without_alternatives_is_kept(self):
        """Test that the placeholder is returned when nothing replaces it."""
        node = img(f'<img src="{SVG_PLACEHOLDER}">')
        assert resolve_image_src(node) == SVG_PLACEHOLDER

    def test_real_src_is_kept(self):
        """Test that a real src is not replaced by fallbacks."""
        node = img('<img src="https://example.com/a.png" data-original="https://example.com/b.png">')
        assert resolve_image_src(node) == "https://example.com/a.png"


class TestNormalizeLazyImages:
    """Tests for the document-level pre-pass."""

    def test_rewrites_src_from_data_src(self):
        """Test replacing a placeholder src with data-src."""
        html = f'<p><img src="{SVG_PLACEHOLDER}" data-src="https://mmbiz.qpic.cn/a/640?wx_fmt=png&amp;wx_lazy=1"></p>'
        assert resolved_srcs(normalize_lazy_images(html)) == ["https://mmbiz.qpic.cn/a/640?wx_fmt=png"]

    def test_injects_missing_src(self):
        """Test adding src to an image that only has data-src."""
        html = '<img data-src="https://x.com/a.png" alt="a">'
        result = normalize_lazy_images(html)
        assert resolved_srcs(result) == ["https://x.com/a.png"]
        assert 'alt="a"' in result

    def test_keeps_other_attributes(self):
        """Test that other attributes survive the rewrite."""
        html = f'<img src="{SVG_PLACEHOLDER}" data-original="http://y.com/a.jpg" alt="A" title="T" width="10">'
        soup = BeautifulSoup(normalize_lazy_images(html), "html.parser")
        tag = soup.find("img")
        assert tag["src"] == "http://y.com/a.jpg"
        assert tag["alt"] == "A"
        assert tag["title"] == "T"
        assert tag["width"] == "10"
        assert tag["data-original"] == "http://y.com/a.jpg"

    def test_document_without_images_is_untouched(self):
        """Test the no-image fast path."""
        html = "<p>No <b>images</b> here<br></p>"
        assert normalize_lazy_images(html) is html

    def test_plain_images_are_untouched(self):
        """Test that ordinary images are not rewritten."""
        html = '<img src="https://example.com/a.png">'
        assert normalize_lazy_images(html) == html

    def test_images_without_src_are_untouched(self):
        """Test that images with nothing to resolve are not rewritten."""
        html = '<p>Text<img alt="logo"><img src=""></p>'
        assert normalize_lazy_images(html) == html

    def test_idempotent(self):
        """Test that a second pass changes nothing."""
        html = (
            f'<div><img src="{SVG_PLACEHOLDER}" data-src="https://x.com/a.png&amp;wx_co=1">'
            f'<img src="{SVG_PLACEHOLDER}" data-failsrc="http://y.com/b.png"></div>'
        )
        once = normalize_lazy_images(html)
        assert normalize_lazy_images(once) == once
        assert resolved_srcs(once) == ["https://x.com/a.png", "http://y.com/b.png"]
