"""Application keys for type-safe app configuration access."""

from aiohttp import web

from markserve.config import Config
from markserve.core.page import PageComposer
from markserve.core.paths import PathResolver
from markserve.core.renderer import MarkdownRenderer

config_key = web.AppKey("config", Config)
resolver_key = web.AppKey("resolver", PathResolver)
renderer_key = web.AppKey("renderer", MarkdownRenderer)
composer_key = web.AppKey("composer", PageComposer)
