"""Unit tests for core/preview.py"""

import pytest

from mdblog.core.parse import parse_body
from mdblog.core.preview import preview


def _preview(md: str, limit: int = 200):
    return preview(parse_body(md), limit)


def test_exactly_limit_is_unchanged():
    """A paragraph of exactly `limit` characters comes back whole."""
    text = "x" * 20
    assert _preview(text + "\n", limit=20) == text


def test_one_over_limit_is_truncated():
    """One character over the limit is cut and marked with ' [...]'."""
    assert _preview("x" * 21 + "\n", limit=20) == "x" * 20 + " [...]"


def test_truncates_on_character_boundary():
    """Multi-byte characters count as one and are never split."""
    result = _preview("é" * 11 + "\n", limit=10)
    assert result == "é" * 10 + " [...]"


def test_trailing_whitespace_trimmed_before_marker():
    """Whitespace at the cut point is dropped before the marker."""
    assert _preview("aaaa bbbb\n", limit=5) == "aaaa [...]"


def test_soft_and_hard_breaks():
    """Soft breaks read as spaces, hard breaks as newlines."""
    assert _preview("one\ntwo\n") == "one two"
    assert _preview("one  \ntwo\n") == "one\ntwo"


def test_recurses_through_style_containers():
    """Emphasis, strong and strikethrough contribute their text but not their markup."""
    assert _preview("a *b* **c** ~~d~~ e\n") == "a b c d e"


@pytest.mark.parametrize("md,expected", [
    ("see [the docs](https://example.com) now\n", "see  now"),
    ("run `make` first\n",                        "run  first"),
    ("an ![image](a.png) here\n",                 "an  here"),
])
def test_other_inline_nodes_skipped(md, expected):
    """Links, inline code and images are skipped without recursing."""
    assert _preview(md) == expected


def test_first_top_level_paragraph_only():
    """Paragraphs nested in quotes or lists are not top-level."""
    md = "# Title\n\n> quoted\n\n- listed\n\nThe real one.\n\nSecond paragraph.\n"
    assert _preview(md) == "The real one."


def test_no_paragraph():
    """Headings and code alone give no preview."""
    assert _preview("# Only a heading\n\n```\ncode\n```\n") is None


def test_empty_paragraph_text():
    """A paragraph holding only a link yields no text, hence no preview."""
    assert _preview("[just a link](https://example.com)\n") is None
