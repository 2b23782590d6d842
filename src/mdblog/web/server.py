"""Threaded HTTP server with graceful stop on the shutdown signal"""

import threading

from loguru import logger
from werkzeug.serving import make_server

from mdblog.config import Settings
from mdblog.core.highlight import SyntaxRegistry
from mdblog.corpus.collection import PostCollection
from mdblog.deploy.shutdown import Shutdown
from mdblog.web.app import create_app
from mdblog.web.state import STATE_KEY


def serve(settings: Settings) -> None:
    """Load syntaxes and posts, then serve until the shutdown signal fires or Ctrl-C."""
    registry = SyntaxRegistry.from_directory(settings.syntaxes_dir)
    logger.info("Loaded {} highlighting syntaxes", len(registry))

    collection = PostCollection(settings.channel(), registry, settings.preview_limit)
    collection.refresh(settings.posts_dir)

    shutdown, signal = Shutdown.new()
    app = create_app(settings, collection=collection, registry=registry, shutdown=shutdown)
    server = make_server(settings.host, settings.port, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="mdblog-http", daemon=True)

    logger.info("Starting server on http://{}:{} ({} mode)", settings.host, settings.port, settings.trigger_mode.value)
    thread.start()
    try:
        signal.wait()
        logger.info("Shutdown requested")
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        server.shutdown()
        thread.join()
        app.extensions[STATE_KEY].coordinator.close()
        signal.close()
    logger.info("Server closed gracefully")
