"""HTTP routes: pages, blog, feed, highlight stylesheet and the deploy hook"""

from flask import Blueprint, Response, abort, request
from loguru import logger

from mdblog.core.highlight import stylesheet
from mdblog.core.pipeline import load_page
from mdblog.deploy.trigger import SIGNATURE_HEADER
from mdblog.errors import TriggerError
from mdblog.web.state import current_state


bp = Blueprint("blog", __name__)


def render(template_name: str, context: dict, status: int = 200) -> Response:
    html = current_state().renderer.render(template_name, context)
    return Response(html, status=status, mimetype="text/html")


def _simple(filename: str) -> Response:
    state = current_state()
    try:
        page = load_page(state.settings.pages_dir / filename, state.registry)
    except FileNotFoundError:
        abort(404)
    return render(page.template_name, page.context())


@bp.get("/")
def home():
    return _simple("home.md")


@bp.get("/about")
def about():
    return _simple("about.md")


@bp.get("/blog")
def post_list():
    state = current_state()
    posts = [
        {
            "slug": slug,
            "title": post.title,
            "description": post.description,
            "published": post.published.isoformat(),
        }
        for slug, post in state.collection.iter()
    ]
    return render("post-list", {"title": state.settings.feed_title, "posts": posts})


@bp.get("/blog/post/<slug>")
def post(slug: str):
    found = current_state().collection.get(slug)
    if found is None:
        abort(404)
    return render(found.template_name, found.context())


@bp.get("/blog/feed.rss")
def rss_feed():
    feed = current_state().collection.feed()
    return Response(feed.to_xml(), mimetype="application/rss+xml")


@bp.get("/highlight.css")
def highlight_css():
    return Response(stylesheet(current_state().settings.highlight_style), mimetype="text/css")


@bp.post("/deploy")
def deploy():
    try:
        current_state().coordinator.handle(request.headers.get(SIGNATURE_HEADER), request.get_data())
    except TriggerError as e:
        logger.warning("Rejected deploy trigger: {}", e.reason)
        return Response(e.reason, status=e.status_code, mimetype="text/plain")
    return Response(status=204)
