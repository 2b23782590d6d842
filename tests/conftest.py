"""Root test configuration: content directory fixtures shared by unit and integration tests"""

from pathlib import Path

import pytest

from mdblog.core.highlight import SyntaxRegistry
from mdblog.corpus.feed import ChannelConfig


HOME_MD = """\
---
title: Home
description: Computers, cats, and eternal sleepiness
---

# Welcome

Hello from the home page.
"""

ABOUT_MD = """\
---
title: About me
description: It's me!
---

Just a person who writes things.
"""


@pytest.fixture(scope="session", name="registry")
def registry_fixture():
    return SyntaxRegistry.builtin()


@pytest.fixture(name="channel")
def channel_fixture():
    return ChannelConfig(
        title="Test blog",
        link="https://example.com/blog",
        description="Posts for tests",
        author="me@example.com",
    )


@pytest.fixture(name="write_post")
def write_post_fixture():
    """Factory writing a post with YAML front matter into a directory."""
    def _write(
        directory: Path,
        name: str,
        title: str,
        published: str,
        body: str = "Body text.\n",
        description: str = None,
        ) -> Path:
        lines = ["---", f'title: "{title}"', f"published: {published}"]
        if description is not None:
            lines.append(f'description: "{description}"')
        lines += ["---", "", body]
        path = directory / name
        path.write_text("\n".join(lines), encoding="utf-8")
        return path
    return _write


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path, write_post):
    """A content root with two posts and the two standalone pages."""
    root = tmp_path / "content"
    posts = root / "blog-pages"
    pages = root / "pages"
    posts.mkdir(parents=True)
    pages.mkdir()
    write_post(posts, "a.md", "Older post", "2024-01-01T09:00:00+00:00", body="The *first* post.\n")
    write_post(posts, "b.md", "Newer post", "2024-06-01T09:00:00+00:00",
               body="```python\ndef add(a, b):\n    return a + b\n```\n")
    (pages / "home.md").write_text(HOME_MD, encoding="utf-8")
    (pages / "about.md").write_text(ABOUT_MD, encoding="utf-8")
    return root
