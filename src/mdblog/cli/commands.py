"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger

from mdblog.config import Settings, load_config
from mdblog.core.highlight import SyntaxRegistry
from mdblog.corpus.collection import PostCollection, Snapshot
from mdblog.logging_config import configure_logging
from mdblog.web.server import serve


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(ctx: typer.Context, overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then apply its log level."""
    overrides = {**(overrides or {}), **(ctx.obj or {})}
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _scan(settings: Settings) -> Snapshot:
    """Build a snapshot of settings.posts_dir without starting a server."""
    try:
        registry = SyntaxRegistry.from_directory(settings.syntaxes_dir)
        collection = PostCollection(settings.channel(), registry, settings.preview_limit)
        return collection.refresh(settings.posts_dir)
    except OSError as e:
        _fail(f"Cannot read posts from {settings.posts_dir}", e)


def serve_cmd(
    ctx: typer.Context,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content root directory")] = None,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
    mode: Annotated[Optional[str], typer.Option("--trigger-mode", help="shutdown or refresh")] = None,
    ):
    """Serve the blog until a completed deploy trigger (or Ctrl-C) stops it."""
    settings = _settings(ctx, overrides={"content_dir": content, "host": host, "port": port, "trigger_mode": mode})
    if not settings.webhook_secret:
        logger.warning("No webhook secret configured; POST /deploy will answer 503")
    try:
        serve(settings)
    except OSError as e:
        _fail("Server failed", e)


def check_cmd(
    ctx: typer.Context,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content root directory")] = None,
    ):
    """Parse every post and report the ones that fail. Exits 1 if any do."""
    settings = _settings(ctx, overrides={"content_dir": content})
    snapshot = _scan(settings)
    for slug, post in snapshot.posts.items():
        typer.echo(f"  ok: {slug} ({post.published.date().isoformat()}) {post.title}")
    for error in snapshot.errors:
        typer.echo(f"  failed: {error.path.name}: {error.message}", err=True)
    typer.echo(f"Checked {len(snapshot.posts) + len(snapshot.errors)} file(s): {len(snapshot.errors)} failed")
    if snapshot.errors:
        raise typer.Exit(1)


def feed_cmd(
    ctx: typer.Context,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content root directory")] = None,
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write the feed here instead of stdout")] = None,
    ):
    """Print the RSS feed built from the posts directory."""
    settings = _settings(ctx, overrides={"content_dir": content})
    xml = _scan(settings).feed.to_xml()
    if out is None:
        typer.echo(xml, nl=False)
        return
    out.write_text(xml, encoding="utf-8")
    typer.echo(f"Wrote feed to {out}")
