"""Content root bootstrap.

Creates the content root on first start and seeds it with a sample page and
stylesheet when it holds no markdown yet.
"""

import logging
from importlib.resources import files
from pathlib import Path

from markserve.core.paths import INDEX_FILE, STYLESHEET_FILE

logger = logging.getLogger(__name__)


def ensure_content_root(content_root: Path) -> None:
    """Create the content root if it doesn't exist.

    Raises:
        OSError: If the directory cannot be created
    """
    content_root.mkdir(parents=True, exist_ok=True)


def has_markdown(content_root: Path) -> bool:
    """Check whether the content root holds any top-level markdown file."""
    if not content_root.is_dir():
        return False
    return any(path.is_file() for path in content_root.glob("*.md"))


def read_default(name: str) -> str:
    """Read a bundled default content file.

    Args:
        name: File name inside the package's defaults directory

    Returns:
        File contents
    """
    return files("markserve").joinpath("defaults").joinpath(name).read_text(encoding="utf-8")


def seed_default_content(content_root: Path) -> list[Path]:
    """Write sample content into an empty content root.

    Does nothing once the root contains a markdown file. An existing
    style.css is never overwritten.

    Args:
        content_root: Content root directory

    Returns:
        Paths of the files written

    Raises:
        OSError: If a sample file cannot be written
    """
    if has_markdown(content_root):
        return []

    written: list[Path] = []

    css_path = content_root / STYLESHEET_FILE
    if not css_path.exists():
        css_path.write_text(read_default(STYLESHEET_FILE), encoding="utf-8")
        logger.info(f"Created sample {STYLESHEET_FILE} file at {css_path}")
        written.append(css_path)

    index_path = content_root / INDEX_FILE
    index_path.write_text(read_default(INDEX_FILE), encoding="utf-8")
    logger.info(f"Created sample {INDEX_FILE} file at {index_path}")
    written.append(index_path)

    return written
