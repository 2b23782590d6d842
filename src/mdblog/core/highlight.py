"""Syntax definition registry and in-place highlighting of code blocks"""

from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Optional

import pygments
from loguru import logger
from markdown_it.token import Token
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import find_lexer_class, get_all_lexers, load_lexer_from_file

from mdblog.core.tree import CODE_BLOCK_TYPES, DocumentTree


CLASS_PREFIX = 'hl-'
CUSTOM_LEXER_NAME = 'CustomLexer'
LEXER_OPTIONS = {'stripnl': False, 'ensurenl': True}


@dataclass(frozen=True)
class SyntaxDefinition:
    """One language grammar: display name, aliases and filename patterns."""
    name:      str
    aliases:   tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()
    lexer_cls: Optional[type[Lexer]] = None     # None for Pygments builtins, resolved lazily

    def create(self) -> Lexer:
        """Return a fresh lexer instance for one code block."""
        cls = self.lexer_cls or find_lexer_class(self.name)
        return cls(**LEXER_OPTIONS)


def _simple_extension(pattern: str) -> Optional[str]:
    """'*.py' -> 'py'; None for patterns with other wildcards."""
    if pattern.startswith('*.') and not any(c in pattern[2:] for c in '*?['):
        return pattern[2:].lower()
    return None


class SyntaxRegistry:
    """Immutable lookup of syntax definitions by extension or name.

    Built once at startup and shared by reference with every parse.
    """

    def __init__(self, definitions: Iterable[SyntaxDefinition]):
        self._definitions = tuple(definitions)
        by_extension: dict[str, SyntaxDefinition] = {}
        by_name: dict[str, SyntaxDefinition] = {}
        patterns: list[tuple[str, SyntaxDefinition]] = []

        for definition in self._definitions:
            for pattern in definition.filenames:
                ext = _simple_extension(pattern)
                if ext is not None:
                    by_extension.setdefault(ext, definition)
                else:
                    patterns.append((pattern.lower(), definition))
            for name in (definition.name, *definition.aliases):
                by_name.setdefault(name.lower(), definition)

        self._by_extension = MappingProxyType(by_extension)
        self._by_name = MappingProxyType(by_name)
        self._patterns = tuple(patterns)

    def __len__(self) -> int:
        return len(self._definitions)

    @classmethod
    def builtin(cls) -> "SyntaxRegistry":
        return cls(_builtin_definitions())

    @classmethod
    def from_directory(cls, directory: Path, include_builtin: bool = True) -> "SyntaxRegistry":
        """Load custom lexers from directory/*.py; they take precedence over builtins.

        Each file must define a `CustomLexer` class (the Pygments plugin-file convention).
        """
        definitions: list[SyntaxDefinition] = []
        if directory.is_dir():
            for path in sorted(directory.glob('*.py')):
                lexer = load_lexer_from_file(str(path), CUSTOM_LEXER_NAME)
                lexer_cls = type(lexer)
                definitions.append(SyntaxDefinition(
                    name=lexer_cls.name or path.stem,
                    aliases=tuple(lexer_cls.aliases),
                    filenames=tuple(lexer_cls.filenames),
                    lexer_cls=lexer_cls,
                ))
                logger.debug("Loaded syntax {!r} from {}", definitions[-1].name, path)
        if include_builtin:
            definitions.extend(_builtin_definitions())
        return cls(definitions)

    def find_by_extension(self, extension: str) -> Optional[SyntaxDefinition]:
        ext = extension.lower().lstrip('.')
        if ext in self._by_extension:
            return self._by_extension[ext]
        filename = f"file.{ext}"
        for pattern, definition in self._patterns:
            if fnmatchcase(filename, pattern):
                return definition
        return None

    def find_by_name(self, name: str) -> Optional[SyntaxDefinition]:
        return self._by_name.get(name.lower())

    def resolve(self, language: str) -> Optional[SyntaxDefinition]:
        """Match a code block language tag by extension first, then by name."""
        if not language:
            return None
        return self.find_by_extension(language) or self.find_by_name(language)


def _builtin_definitions() -> list[SyntaxDefinition]:
    return [
        SyntaxDefinition(name=name, aliases=tuple(aliases), filenames=tuple(filenames))
        for name, aliases, filenames, _ in get_all_lexers()
    ]


class ClassedHtmlGenerator:
    """Line-fed highlighter emitting `<span class="hl-...">` markup.

    Lines are buffered so that constructs spanning several lines (block
    comments, multi-line strings) keep their lexer state.
    """

    def __init__(self, lexer: Lexer, class_prefix: str = CLASS_PREFIX):
        self._lexer = lexer
        self._formatter = HtmlFormatter(nowrap=True, classprefix=class_prefix)
        self._lines: list[str] = []

    def feed_line(self, line: str) -> None:
        self._lines.append(line)

    def finalize(self) -> str:
        return pygments.highlight(''.join(self._lines), self._lexer, self._formatter)


def _language_tag(token: Token) -> str:
    info = token.info.strip()
    return info.split(maxsplit=1)[0] if info else ''


def highlight(tree: DocumentTree, registry: SyntaxRegistry) -> int:
    """Replace each highlightable code block with an html_block node. Returns the count.

    Blocks whose language does not resolve are left as they are. Converted
    nodes are no longer code blocks, so running this twice changes nothing.
    """
    converted = 0
    for index, token in list(tree.find(*CODE_BLOCK_TYPES)):
        language = _language_tag(token)
        definition = registry.resolve(language)
        if definition is None:
            if language:
                logger.debug("No syntax definition for {!r}; leaving code block as is", language)
            continue

        generator = ClassedHtmlGenerator(definition.create())
        for line in token.content.splitlines(keepends=True):
            generator.feed_line(line)

        tree.replace(index, Token(
            'html_block', '', 0,
            content=f"<pre><code>{generator.finalize()}</code></pre>\n",
            map=token.map,
            level=token.level,
            block=True,
        ))
        converted += 1
    return converted


def stylesheet(style: str = 'default') -> str:
    """CSS rules for the classed spans, scoped to `pre code`."""
    return HtmlFormatter(style=style, classprefix=CLASS_PREFIX).get_style_defs('pre code')
