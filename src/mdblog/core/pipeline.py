"""Turn one raw document into a rendered Post"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mdblog.core.highlight import SyntaxRegistry
from mdblog.core.models import NO_DESCRIPTION, DocumentKind, PageMetadata, Post, PostMetadata
from mdblog.core.parse import parse, render
from mdblog.core.preview import preview
from mdblog.core.utils.slug import slug_from_path


PREVIEW_CHARACTER_LIMIT = 200


@dataclass
class RawDocument:
    """File contents read during a scan; discarded once parsed."""
    path:    Path
    content: str

    @property
    def slug(self) -> str:
        return slug_from_path(self.path)


def build_post(
    content: str,
    slug: str,
    registry: Optional[SyntaxRegistry] = None,
    preview_limit: int = PREVIEW_CHARACTER_LIMIT,
    ) -> Post:
    """Parse, highlight and render a blog post.

    Description falls back to a preview of the first paragraph, then to a placeholder.
    """
    metadata, tree = parse(content, PostMetadata, registry)
    description = metadata.description
    if description is None:
        description = preview(tree, preview_limit) or NO_DESCRIPTION
    return Post(
        slug=slug,
        title=metadata.title,
        description=description,
        published=metadata.published,
        rendered_html=render(tree),
        kind=DocumentKind.post,
    )


def build_page(content: str, slug: str, registry: Optional[SyntaxRegistry] = None) -> Post:
    """Parse and render a standalone page (title + description, no date)."""
    metadata, tree = parse(content, PageMetadata, registry)
    return Post(
        slug=slug,
        title=metadata.title,
        description=metadata.description,
        rendered_html=render(tree),
        kind=DocumentKind.page,
    )


def load_page(path: Path, registry: Optional[SyntaxRegistry] = None) -> Post:
    """Read and build a standalone page from disk. OSError and ParseError propagate."""
    doc = RawDocument(path=path, content=path.read_text(encoding='utf-8'))
    return build_page(doc.content, doc.slug, registry)
