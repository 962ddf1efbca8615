"""Page route.

Single catch-all handler: validates and resolves the request path, then
serves the stylesheet or renders the markdown file into the page shell.
"""

import logging
from urllib.parse import unquote, urlsplit

from aiohttp import web
from jinja2 import TemplateError

from markserve.app_keys import composer_key, renderer_key, resolver_key
from markserve.core.paths import PageNotFoundError, PathError
from markserve.core.renderer import extract_title

logger = logging.getLogger(__name__)


def create_page_routes() -> list[web.RouteDef]:
    return [
        web.route("*", "/{path:.*}", get_page),
    ]


def request_url_path(request: web.Request) -> str:
    """Return the percent-decoded request path without its leading slash.

    Uses the path component of the raw request target, so encoded separators
    and dot segments reach validation exactly as the client sent them.
    Absolute-form targets (``http://host/guide``) contribute only their path.
    """
    target = request.raw_path
    if target.startswith("/"):
        path = target.partition("?")[0]
    else:
        path = urlsplit(target).path
    return unquote(path).removeprefix("/")


async def get_page(request: web.Request) -> web.StreamResponse:
    url_path = request_url_path(request)
    resolver = request.app[resolver_key]

    try:
        resolved = resolver.resolve(url_path)
    except PathError as e:
        logger.debug(f"Rejected {url_path!r}: {e}")
        return web.Response(status=400, text="Invalid path")
    except PageNotFoundError:
        logger.debug(f"Not found: {url_path!r}")
        return web.Response(status=404, text="404 page not found")

    # The file may vanish or become unreadable after resolution
    try:
        content = resolved.file_path.read_bytes()
    except OSError:
        logger.exception(f"Error reading {resolved.file_path}")
        return web.Response(status=500, text="Error reading file")

    if resolved.is_stylesheet:
        return web.Response(body=content, content_type=resolved.content_type)

    html = request.app[renderer_key].render(content)
    title = extract_title(content.decode("utf-8", errors="replace"))

    try:
        page = request.app[composer_key].compose(title, html)
    except TemplateError:
        logger.exception("Template error")
        return web.Response(status=500, text="Template error")

    logger.debug(f"Serving {url_path!r} from {resolved.file_path}")
    return web.Response(text=page, content_type="text/html")
