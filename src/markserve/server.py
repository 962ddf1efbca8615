"""aiohttp server for markserve.

Application factory, security header middleware and server runner.
"""

import logging

from aiohttp import web
from aiohttp.typedefs import Handler

from markserve.app_keys import composer_key, config_key, renderer_key, resolver_key
from markserve.config import Config
from markserve.core.page import PageComposer
from markserve.core.paths import PathResolver
from markserve.core.renderer import MarkdownRenderer
from markserve.pages import create_page_routes

logger = logging.getLogger(__name__)

# frame-ancestors * allows embedding from any origin, so no X-Frame-Options
CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "script-src 'self'; "
    "img-src 'self' data: https:; "
    "font-src 'self'; "
    "connect-src 'self'; "
    "frame-ancestors *; "
    "base-uri 'self'"
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}


@web.middleware
async def security_headers_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    """Attach security headers to every response when enabled in config."""
    enabled = request.app[config_key].server.security_headers
    try:
        response = await handler(request)
    except web.HTTPException as e:
        if enabled:
            e.headers.update(SECURITY_HEADERS)
        raise
    if enabled:
        response.headers.update(SECURITY_HEADERS)
    return response


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[security_headers_middleware])

    app[config_key] = config
    app[resolver_key] = PathResolver(config.content.root)
    app[renderer_key] = MarkdownRenderer()
    app[composer_key] = PageComposer()

    app.router.add_routes(create_page_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(
        f"Starting server on port {config.server.port}, "
        f"serving content from {config.content.root}"
    )
    web.run_app(app, host=config.server.host, port=config.server.port)
