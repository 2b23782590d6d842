"""Plain-text preview derived from a document's first paragraph"""

from typing import Optional

from markdown_it.tree import SyntaxTreeNode

from mdblog.core.tree import DocumentTree


ELLIPSIS = " [...]"
STYLE_CONTAINERS = frozenset({'em', 'strong', 's', 'sup'})


def _collect_text(nodes: list[SyntaxTreeNode], parts: list[str]) -> None:
    for node in nodes:
        if node.type == 'text':
            parts.append(node.content)
        elif node.type == 'softbreak':
            parts.append(' ')
        elif node.type == 'hardbreak':
            parts.append('\n')
        elif node.type == 'inline' or node.type in STYLE_CONTAINERS:
            _collect_text(node.children, parts)
        # links, images, inline code and raw html contribute nothing


def preview(tree: DocumentTree, limit: int) -> Optional[str]:
    """Text of the first top-level paragraph, cut to `limit` characters plus " [...]".

    Returns None when there is no top-level paragraph or it holds no text.
    """
    root = tree.syntax_tree()
    paragraph = next((node for node in root.children if node.type == 'paragraph'), None)
    if paragraph is None:
        return None

    parts: list[str] = []
    _collect_text(paragraph.children, parts)
    text = ''.join(parts)
    if not text:
        return None
    if len(text) > limit:
        return text[:limit].rstrip() + ELLIPSIS
    return text
