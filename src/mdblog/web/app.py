"""Flask application factory"""

from typing import Optional

from flask import Flask, Response
from jinja2 import TemplateError
from loguru import logger
from werkzeug.exceptions import HTTPException, InternalServerError

from mdblog.config import Settings
from mdblog.core.highlight import SyntaxRegistry
from mdblog.corpus.collection import PostCollection
from mdblog.deploy.shutdown import Shutdown
from mdblog.deploy.trigger import Coordinator
from mdblog.errors import ParseError
from mdblog.web.renderer import Renderer
from mdblog.web.routes import bp, render
from mdblog.web.state import STATE_KEY, BlogState


MAX_TRIGGER_BODY = 25 * 1024 * 1024


def _error_page(error: HTTPException) -> Response:
    reason = f"Status code {error.code}: {error.name}."
    try:
        return render("error", {"title": error.name, "reason": reason}, status=error.code)
    except TemplateError as e:
        logger.error("Error template failed: {}", e)
        return Response(reason, status=error.code, mimetype="text/plain")


def _broken_page(error: ParseError) -> Response:
    logger.error("Page failed to build: {}", error)
    return _error_page(InternalServerError())


def create_app(
    settings: Settings,
    collection: Optional[PostCollection] = None,
    registry: Optional[SyntaxRegistry] = None,
    shutdown: Optional[Shutdown] = None,
    ) -> Flask:
    """Build the app. Without a collection, one is created and scanned from settings.posts_dir."""
    if registry is None:
        registry = SyntaxRegistry.from_directory(settings.syntaxes_dir)
    if collection is None:
        collection = PostCollection(settings.channel(), registry, settings.preview_limit)
        collection.refresh(settings.posts_dir)

    coordinator = Coordinator(
        settings.trigger_mode,
        secret=settings.webhook_secret,
        shutdown=shutdown,
        collection=collection,
        directory=settings.posts_dir,
    )

    app = Flask(__name__, static_folder=str(settings.static_dir.resolve()), static_url_path="/static")
    app.config["MAX_CONTENT_LENGTH"] = MAX_TRIGGER_BODY
    app.extensions[STATE_KEY] = BlogState(
        settings=settings,
        collection=collection,
        registry=registry,
        renderer=Renderer(settings.templates_dir),
        coordinator=coordinator,
    )
    app.register_blueprint(bp)
    app.register_error_handler(HTTPException, _error_page)
    app.register_error_handler(ParseError, _broken_page)
    return app
