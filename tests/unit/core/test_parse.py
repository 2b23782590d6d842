"""Unit tests for core/parse.py"""

import pytest

from mdblog.core.models import PageMetadata, PostMetadata
from mdblog.core.parse import load_metadata, parse, parse_body, render, split_frontmatter
from mdblog.errors import MetadataError, ParseError


def test_split_frontmatter_with_yaml():
    """split_frontmatter returns the YAML text and the body after the closing marker."""
    fm, body = split_frontmatter("---\ntitle: Hello\n---\n# Body\n")
    assert fm == "title: Hello\n"
    assert body == "# Body\n"


def test_split_frontmatter_no_frontmatter():
    """Without a leading marker the whole text is body and front matter is empty."""
    text = "# No frontmatter\n"
    assert split_frontmatter(text) == ("", text)


def test_split_frontmatter_at_end_of_file():
    """A closing marker without a trailing newline still ends the block."""
    fm, body = split_frontmatter("---\ntitle: Hello\n---")
    assert fm == "title: Hello\n"
    assert body == ""


def test_load_metadata_ignores_unknown_fields():
    """Extra front matter keys are dropped rather than rejected."""
    meta = load_metadata("title: T\ndescription: D\nextra: 1\n", PageMetadata)
    assert meta == PageMetadata(title="T", description="D")


def test_load_metadata_invalid_yaml():
    """Broken YAML raises MetadataError."""
    with pytest.raises(MetadataError, match="Invalid YAML"):
        load_metadata("title: [unclosed\n", PageMetadata)


def test_load_metadata_not_a_mapping():
    """A YAML list is not valid front matter."""
    with pytest.raises(MetadataError, match="expected a mapping"):
        load_metadata("- a\n- b\n", PageMetadata)


def test_parse_missing_frontmatter_fails_required_fields():
    """A post with no front matter at all is rejected as a metadata error."""
    with pytest.raises(MetadataError):
        parse("Just text.\n", PostMetadata)


@pytest.mark.parametrize("published", ["not a date", "2024-13-45", "[1, 2]"])
def test_parse_malformed_published(published):
    """A malformed published value invalidates the post."""
    with pytest.raises(ParseError):
        parse(f"---\ntitle: T\npublished: {published}\n---\nBody\n", PostMetadata)


def test_parse_missing_published():
    """Posts must carry a published date."""
    with pytest.raises(MetadataError):
        parse("---\ntitle: T\n---\nBody\n", PostMetadata)


def test_parse_returns_metadata_and_tree(sample_post):
    """parse yields typed metadata and a tree whose body excludes the front matter."""
    meta, tree = parse(sample_post, PostMetadata)
    assert meta.title == "Sample"
    assert meta.published.utcoffset().total_seconds() == 3600
    html = render(tree)
    assert "<strong>bold</strong>" in html
    assert "title:" not in html


def test_parse_without_registry_leaves_code_blocks(sample_post):
    """No registry means no highlighting pass."""
    _, tree = parse(sample_post, PostMetadata)
    assert tree.has_code_blocks()


def test_parse_with_registry_highlights(sample_post, registry):
    """With a registry, resolvable code blocks are rewritten before rendering."""
    _, tree = parse(sample_post, PostMetadata, registry)
    assert not tree.has_code_blocks()
    assert "```" not in render(tree)


@pytest.mark.parametrize("md,expected", [
    ("~~gone~~\n",                               "<s>gone</s>"),
    ("| a | b |\n|---|---|\n| 1 | 2 |\n",        "<table>"),
    ("- [ ] todo\n- [x] done\n",                 'type="checkbox"'),
    ("Term\n: Definition\n",                     "<dt>Term</dt>"),
    ("Visit https://example.com today\n",        '<a href="https://example.com">'),
    ('<div class="note">raw</div>\n',            '<div class="note">raw</div>'),
    ("Press <kbd>q</kbd> to quit\n",             "<kbd>q</kbd>"),
])
def test_render_extensions(md, expected):
    """Strikethrough, tables, task lists, definition lists, autolinks and raw HTML all render."""
    assert expected in render(parse_body(md))


def test_load_metadata_deep_nesting():
    """Pathologically nested YAML is a MetadataError, not a RecursionError."""
    depth = 5000
    with pytest.raises(MetadataError, match="nested too deeply"):
        load_metadata(f"title: {'[' * depth}{']' * depth}\n", PostMetadata)
