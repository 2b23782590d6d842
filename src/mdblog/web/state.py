"""Per-app shared state handed to request handlers"""

from dataclasses import dataclass

from flask import current_app

from mdblog.config import Settings
from mdblog.core.highlight import SyntaxRegistry
from mdblog.corpus.collection import PostCollection
from mdblog.deploy.trigger import Coordinator
from mdblog.web.renderer import Renderer


STATE_KEY = "mdblog"


@dataclass
class BlogState:
    settings:    Settings
    collection:  PostCollection
    registry:    SyntaxRegistry
    renderer:    Renderer
    coordinator: Coordinator


def current_state() -> BlogState:
    return current_app.extensions[STATE_KEY]
