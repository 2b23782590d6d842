"""Index-addressed document tree over markdown-it block tokens"""

from typing import Any, Iterator

from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode


CODE_BLOCK_TYPES = ('fence', 'code_block')


class DocumentTree:
    """Mutable arena of block tokens produced by one markdown-it parse.

    Every node is addressed by its index in the arena; rewriting a node means
    storing a new token at that index, so traversals never hold aliased
    references into a structure they are modifying. Inline content lives in
    each `inline` token's children.
    """

    def __init__(self, tokens: list[Token], env: dict[str, Any] = None):
        self._tokens = list(tokens)
        self.env = env if env is not None else {}

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    def replace(self, index: int, token: Token) -> None:
        """Swap the node at index for a new one, keeping its position."""
        self._tokens[index] = token

    def find(self, *types: str) -> Iterator[tuple[int, Token]]:
        """Yield (index, token) for every node whose type is in types."""
        for index, token in enumerate(self._tokens):
            if token.type in types:
                yield index, token

    def has_code_blocks(self) -> bool:
        return any(True for _ in self.find(*CODE_BLOCK_TYPES))

    def syntax_tree(self) -> SyntaxTreeNode:
        """Nested view of the current arena, for read-only traversal."""
        return SyntaxTreeNode(self._tokens)
