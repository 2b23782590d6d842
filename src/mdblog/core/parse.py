"""Front-matter extraction, markdown-it parsing and HTML rendering"""

import re
from functools import lru_cache
from typing import Any, Optional, TypeVar

import yaml
from markdown_it import MarkdownIt
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pydantic import BaseModel, ValidationError

from mdblog.core.highlight import SyntaxRegistry, highlight
from mdblog.core.tree import DocumentTree
from mdblog.errors import MetadataError


FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)
PARSER_PRESET = 'gfm-like'

M = TypeVar('M', bound=BaseModel)


@lru_cache(maxsize=None)
def _make_parser(preset: str = PARSER_PRESET) -> MarkdownIt:
    """MarkdownIt with strikethrough, tables, linkify, task lists and definition lists.

    Raw HTML is passed through: content is trusted, single-author text.
    """
    return (
        MarkdownIt(preset, options_update={"html": True, "linkify": True})
        .use(tasklists_plugin)
        .use(deflist_plugin)
    )


def split_frontmatter(text: str) -> tuple[str, str]:
    """Return (frontmatter_text, body). Frontmatter is '' when there is no block."""
    text = text.lstrip('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if m:
        return m.group(1), text[m.end():]
    return '', text


def load_metadata(frontmatter: str, metadata_type: type[M]) -> M:
    """Deserialize YAML front matter into metadata_type; unknown keys are ignored."""
    try:
        data = yaml.safe_load(frontmatter) if frontmatter.strip() else {}
    except (yaml.YAMLError, ValueError) as e:
        # out-of-range dates such as 2024-13-45 surface as ValueError
        raise MetadataError(f"Invalid YAML frontmatter: {e}") from e
    except RecursionError as e:
        raise MetadataError("Invalid YAML frontmatter: nested too deeply") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MetadataError(f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    try:
        return metadata_type.model_validate(data)
    except ValidationError as e:
        raise MetadataError(f"Invalid frontmatter: {e}") from e


def parse_body(body: str) -> DocumentTree:
    env: dict[str, Any] = {}
    tokens = _make_parser().parse(body, env)
    return DocumentTree(tokens, env)


def parse(
    content: str,
    metadata_type: type[M],
    registry: Optional[SyntaxRegistry] = None,
    ) -> tuple[M, DocumentTree]:
    """Parse a document into (metadata, tree), highlighting code when a registry is given."""
    frontmatter, body = split_frontmatter(content)
    metadata = load_metadata(frontmatter, metadata_type)
    tree = parse_body(body)
    if registry is not None:
        highlight(tree, registry)
    return metadata, tree


def render(tree: DocumentTree) -> str:
    """Serialize the tree to HTML with the parser's own options."""
    md = _make_parser()
    return md.renderer.render(tree.tokens, md.options, tree.env)
