"""Sorted, snapshot-swapped collection of posts for one content directory"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from loguru import logger

from mdblog.core.highlight import SyntaxRegistry
from mdblog.core.models import Post
from mdblog.core.pipeline import PREVIEW_CHARACTER_LIMIT, RawDocument, build_post
from mdblog.corpus.feed import ChannelConfig, Feed, build_feed
from mdblog.errors import ContentReadError, ParseError


@dataclass(frozen=True)
class DocumentError:
    """A file that was skipped during a refresh, and why."""
    path:    Path
    slug:    str
    message: str


@dataclass(frozen=True)
class Snapshot:
    """Immutable collection state: posts newest first plus the feed built from them."""
    posts:  Mapping[str, Post]
    feed:   Feed
    errors: tuple[DocumentError, ...] = ()

    @classmethod
    def build(
        cls,
        posts: Iterable[tuple[str, Post]],
        channel: ChannelConfig,
        errors: Iterable[DocumentError] = (),
        ) -> "Snapshot":
        """Sort by published descending (stable) and derive the feed from that order."""
        by_slug: dict[str, Post] = {}
        for slug, post in posts:
            if slug in by_slug:
                logger.warning("Duplicate slug {!r}; keeping the later file", slug)
            by_slug[slug] = post
        ordered = dict(sorted(by_slug.items(), key=lambda item: item[1].published, reverse=True))
        return cls(
            posts=MappingProxyType(ordered),
            feed=build_feed(ordered.values(), channel),
            errors=tuple(errors),
        )


def read_document(path: Path) -> RawDocument:
    try:
        content = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise ContentReadError(f"{path} is not valid UTF-8: {e}") from e
    return RawDocument(path=path, content=content)


def list_files(directory: Path) -> list[Path]:
    """Regular files directly under directory, sorted by name."""
    return sorted(p for p in directory.iterdir() if p.is_file())


class PostCollection:
    """Readers see whole snapshots; refresh builds a new one and swaps the reference.

    A reader that grabbed the old snapshot keeps a consistent view until it asks again.
    Concurrent refreshes each scan in full and the last one to finish wins.
    """

    def __init__(
        self,
        channel: ChannelConfig,
        registry: Optional[SyntaxRegistry] = None,
        preview_limit: int = PREVIEW_CHARACTER_LIMIT,
        ):
        self._channel = channel
        self._registry = registry
        self._preview_limit = preview_limit
        self._snapshot = Snapshot.build((), channel)

    def scan(self, directory: Path) -> Snapshot:
        """Parse every file under directory into a new Snapshot without publishing it.

        Per-file ParseErrors are logged and recorded; OSErrors propagate.
        """
        posts: list[tuple[str, Post]] = []
        errors: list[DocumentError] = []
        for path in list_files(directory):
            doc = read_document(path)
            try:
                post = build_post(doc.content, doc.slug, self._registry, self._preview_limit)
            except ParseError as e:
                logger.warning("Error rendering post {!r}: {}", doc.slug, e)
                errors.append(DocumentError(path=path, slug=doc.slug, message=str(e)))
                continue
            posts.append((doc.slug, post))
        return Snapshot.build(posts, self._channel, errors)

    def refresh(self, directory: Path) -> Snapshot:
        """Rebuild from directory and publish; on OSError the current snapshot stays."""
        snapshot = self.scan(Path(directory))
        self._snapshot = snapshot
        logger.info(
            "Loaded {} post(s) from {} ({} skipped)",
            len(snapshot.posts), directory, len(snapshot.errors),
        )
        return snapshot

    def snapshot(self) -> Snapshot:
        return self._snapshot

    def get(self, slug: str) -> Optional[Post]:
        return self._snapshot.posts.get(slug)

    def iter(self) -> Iterator[tuple[str, Post]]:
        """Fresh traversal, newest first, of whatever snapshot is current now."""
        return iter(self._snapshot.posts.items())

    def feed(self) -> Feed:
        return self._snapshot.feed

    def __len__(self) -> int:
        return len(self._snapshot.posts)
