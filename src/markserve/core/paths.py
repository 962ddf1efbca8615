"""URL path validation and resolution.

Maps request paths onto files inside the content root. Validation runs on the
raw URL path before any filesystem access; containment is checked again on
every resolved candidate, fallbacks included.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path

INDEX_FILE = "index.md"
STYLESHEET_FILE = "style.css"
MARKDOWN_SUFFIX = ".md"

MARKDOWN_CONTENT_TYPE = "text/markdown"
STYLESHEET_CONTENT_TYPE = "text/css"

# ASCII only: non-ASCII file names are unreachable
_ALLOWED_PATH_RE = re.compile(r"[A-Za-z0-9._/-]*")


class PathError(Exception):
    """Request path cannot be used to address content."""


class InvalidPathError(PathError):
    """Raw URL path failed the character or traversal checks."""


class UnsafePathError(PathError):
    """Resolved path lies outside the content root."""


class PageNotFoundError(Exception):
    """No file exists for the request path after all fallbacks."""


@dataclass(frozen=True)
class ResolvedPath:
    """A file inside the content root selected for a request."""

    file_path: Path
    content_type: str

    @property
    def is_stylesheet(self) -> bool:
        return self.content_type == STYLESHEET_CONTENT_TYPE


def validate_path(url_path: str) -> None:
    """Reject URL paths that could be used to escape the content root.

    Args:
        url_path: URL-decoded request path without its leading slash

    Raises:
        InvalidPathError: If the path contains traversal patterns or
            characters outside letters, digits, ``-``, ``_``, ``.`` and ``/``
    """
    if (
        ".." in url_path
        or "//" in url_path
        or url_path.startswith("/")
        or "\\" in url_path
    ):
        raise InvalidPathError(f"Invalid path: contains dangerous characters: {url_path!r}")

    if not _ALLOWED_PATH_RE.fullmatch(url_path):
        raise InvalidPathError(f"Invalid path: contains invalid characters: {url_path!r}")


def is_path_safe(content_root: Path, candidate: Path) -> bool:
    """Check that candidate resolves to a location inside content_root.

    Both paths are made absolute and symlink-resolved before comparison.

    Args:
        content_root: Content root directory
        candidate: Path to check

    Returns:
        True if the relative path from root to candidate stays inside the root
    """
    try:
        root = content_root.resolve()
        resolved = candidate.resolve()
        relative = os.path.relpath(resolved, root)
    except (OSError, ValueError, RuntimeError):
        return False

    return relative.split(os.sep, 1)[0] != os.pardir


class PathResolver:
    """Resolves URL paths to files under a content root.

    Applies the clean-URL convention (``/guide`` serves ``guide.md``), the
    directory index convention (``/docs/`` serves ``docs/index.md``) and falls
    back to the root ``index.md`` for unknown pages.
    """

    def __init__(self, content_root: Path) -> None:
        """Initialize resolver.

        Args:
            content_root: Directory containing markdown sources and style.css
        """
        self._content_root = content_root

    @property
    def content_root(self) -> Path:
        """Directory containing markdown sources."""
        return self._content_root

    def resolve(self, url_path: str) -> ResolvedPath:
        """Resolve a URL path to a file inside the content root.

        Args:
            url_path: URL-decoded request path without its leading slash,
                      e.g. "", "guide", "guide.md", "docs/" or "style.css"

        Returns:
            ResolvedPath of an existing file

        Raises:
            InvalidPathError: If the URL path fails validation
            UnsafePathError: If a candidate path escapes the content root
            PageNotFoundError: If no file exists after all fallbacks
        """
        if url_path == "":
            url_path = INDEX_FILE

        validate_path(url_path)

        if url_path == STYLESHEET_FILE:
            css_path = self._checked(self._content_root / STYLESHEET_FILE)
            if not css_path.is_file():
                raise PageNotFoundError(url_path)
            return ResolvedPath(css_path, STYLESHEET_CONTENT_TYPE)

        is_directory = url_path.endswith("/")
        if not url_path.endswith(MARKDOWN_SUFFIX) and not is_directory:
            url_path += MARKDOWN_SUFFIX

        file_path = self._checked(self._content_root / url_path)
        if file_path.is_file():
            return ResolvedPath(file_path, MARKDOWN_CONTENT_TYPE)

        if is_directory:
            fallback = self._checked(self._content_root / url_path / INDEX_FILE)
        else:
            fallback = self._checked(self._content_root / INDEX_FILE)

        if not fallback.is_file():
            raise PageNotFoundError(url_path)
        return ResolvedPath(fallback, MARKDOWN_CONTENT_TYPE)

    def _checked(self, candidate: Path) -> Path:
        if not is_path_safe(self._content_root, candidate):
            raise UnsafePathError(f"Path escapes content root: {candidate}")
        return candidate
