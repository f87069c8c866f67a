"""Tests for Markdown post-processing."""

from mdconvert.conversion.postprocess import (
    LinkBracketState,
    escape_multiline_links,
    postprocess,
    remove_skip_to_content_links,
)


class TestLinkBracketState:
    """Tests for the bracket depth counter."""

    def test_depth_tracks_brackets(self):
        """Test that opening brackets increase the depth."""
        state = LinkBracketState()
        for char in "[[":
            state.feed(char)
        assert state.depth == 2
        assert state.inside_link

    def test_depth_never_goes_negative(self):
        """Test that stray closing brackets are ignored."""
        state = LinkBracketState()
        for char in "]]]":
            state.feed(char)
        assert state.depth == 0
        assert not state.inside_link


class TestEscapeMultilineLinks:
    """Tests for escape_multiline_links."""

    def test_newline_inside_link_is_escaped(self):
        """Test escaping a line break inside link text."""
        assert escape_multiline_links("[a\nb](http://x)") == "[a\\\nb](http://x)"

    def test_text_without_brackets_is_unchanged(self):
        """Test that text without links is returned as is."""
        assert escape_multiline_links("plain\ntext") == "plain\ntext"

    def test_newline_after_link_is_unchanged(self):
        """Test that line breaks outside links are kept."""
        markdown = "[a](http://x)\nnext line"
        assert escape_multiline_links(markdown) == markdown

    def test_nested_brackets(self):
        """Test line breaks inside nested brackets."""
        markdown = "[outer [inner]\nrest](http://x)"
        assert escape_multiline_links(markdown) == "[outer [inner]\\\nrest](http://x)"

    def test_stray_closing_bracket_does_not_open_link(self):
        """Test that a lone closing bracket does not start a link."""
        markdown = "a]\nb"
        assert escape_multiline_links(markdown) == markdown

    def test_multiple_newlines_inside_link(self):
        """Test that every line break inside a link is escaped."""
        assert escape_multiline_links("[a\n\nb](u)") == "[a\\\n\\\nb](u)"

    def test_brackets_in_code_spans_are_counted(self):
        """Test that brackets inside code spans count as link brackets."""
        assert escape_multiline_links("`[`\nfoo") == "`[`\\\nfoo"


class TestRemoveSkipToContentLinks:
    """Tests for remove_skip_to_content_links."""

    def test_removes_skip_link(self):
        """Test removing a skip-to-content link."""
        assert remove_skip_to_content_links("[Skip to Content](#main)") == ""

    def test_case_insensitive(self):
        """Test that the link text is matched case-insensitively."""
        assert remove_skip_to_content_links("[skip to content](#skip)") == ""
        assert remove_skip_to_content_links("[SKIP TO CONTENT](#page)") == ""

    def test_removes_only_the_link(self):
        """Test that surrounding text is kept."""
        markdown = "Before [Skip to Content](#main) after"
        assert remove_skip_to_content_links(markdown) == "Before  after"

    def test_empty_fragment_target(self):
        """Test a bare # target."""
        assert remove_skip_to_content_links("[Skip to Content](#)") == ""

    def test_non_fragment_target_is_kept(self):
        """Test that links to other pages are kept."""
        markdown = "[Skip to Content](https://example.com/#main)"
        assert remove_skip_to_content_links(markdown) == markdown

    def test_other_links_are_kept(self):
        """Test that other in-page links are kept."""
        markdown = "[Skip to navigation](#nav)"
        assert remove_skip_to_content_links(markdown) == markdown


class TestPostprocess:
    """Tests for the combined post-processing pass."""

    def test_applies_both_transforms(self):
        """Test that both passes run."""
        markdown = "[Skip to Content](#main)\n# Title\n[multi\nline](http://x)"
        assert postprocess(markdown) == "\n# Title\n[multi\\\nline](http://x)"

    def test_pure_function(self):
        """Test that repeated calls give the same output."""
        markdown = "[a\nb](u)"
        assert postprocess(markdown) == postprocess(markdown)
