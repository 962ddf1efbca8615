"""CLI interface for markserve.

Command-line tool for serving a directory of markdown files.
"""

import logging
import sys
from pathlib import Path

import click

from markserve.config import Config
from markserve.core.seed import ensure_content_root, seed_default_content

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="markserve")
def cli() -> None:
    """markserve - Markdown files served as HTML pages."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover markserve.toml)",
)
@click.option(
    "--content-dir",
    "-d",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Content directory (overrides CONTENT_DIR and config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides PORT and config)",
)
@click.option(
    "--security-headers/--no-security-headers",
    default=None,
    help="Enable/disable HTTP security headers (overrides HTTP_SECURITY_HEADERS and config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every request resolution)",
)
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    host: str | None,
    port: int | None,
    security_headers: bool | None,
    verbose: bool,
) -> None:
    """Start the markdown server."""
    from markserve.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    config = config.with_overrides(
        host=host,
        port=port,
        content_root=content_dir,
        security_headers=security_headers,
    )

    content_root = config.content.root
    try:
        ensure_content_root(content_root)
    except OSError as e:
        click.echo(
            click.style(f"Error: failed to create content directory: {e}", fg="red"),
            err=True,
        )
        sys.exit(1)

    try:
        for path in seed_default_content(content_root):
            click.echo(f"Created sample file: {path}")
    except OSError as e:
        logger.warning(f"Failed to create sample content: {e}")

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {content_root}")
    if not config.server.security_headers:
        click.echo("HTTP security headers disabled")

    run_server(config)


if __name__ == "__main__":
    cli()
