"""Configuration management for markserve.

Supports TOML configuration format with auto-discovery, overridden by
environment variables and then by command-line options.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "markserve.toml"

CONTENT_DIR_ENV = "CONTENT_DIR"
PORT_ENV = "PORT"
SECURITY_HEADERS_ENV = "HTTP_SECURITY_HEADERS"
SECURITY_HEADERS_DISABLE = "disable"


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    security_headers: bool = True


@dataclass(frozen=True)
class ContentConfig:
    """Content configuration."""

    root: Path = field(default_factory=lambda: Path("content"))


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    config_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Config:
        """Load configuration from file and environment.

        If config_path is provided, loads from that file. Otherwise, searches
        for markserve.toml in current directory and parents, falling back to
        defaults. Environment variables are applied on top.

        Args:
            config_path: Optional explicit path to config file
            environ: Environment mapping (default: os.environ)

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config = cls._load_from_file(config_path)
        else:
            discovered_path = cls._discover_config()
            if discovered_path is None:
                config = cls._default()
            else:
                config = cls._load_from_file(discovered_path)

        return config._with_environment(os.environ if environ is None else environ)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(server=ServerConfig(), content=ContentConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "0.0.0.0")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        security_headers = data.get("security_headers", True)
        if not isinstance(security_headers, bool):
            raise ValueError("server.security_headers must be a boolean")

        return ServerConfig(host=host, port=port, security_headers=security_headers)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(root=config_dir / "content")

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        root = data.get("root", "content")
        if not isinstance(root, str):
            raise ValueError("content.root must be a string")

        return ContentConfig(root=config_dir / root)

    def _with_environment(self, environ: Mapping[str, str]) -> Config:
        """Apply CONTENT_DIR, PORT and HTTP_SECURITY_HEADERS.

        Empty variables are ignored. HTTP_SECURITY_HEADERS only disables
        headers when set to exactly "disable".
        """
        content_dir = environ.get(CONTENT_DIR_ENV) or None

        port: int | None = None
        port_raw = environ.get(PORT_ENV)
        if port_raw:
            try:
                port = int(port_raw)
            except ValueError:
                raise ValueError(f"{PORT_ENV} must be an integer, got {port_raw!r}") from None

        security_headers: bool | None = None
        if environ.get(SECURITY_HEADERS_ENV) == SECURITY_HEADERS_DISABLE:
            security_headers = False

        return self.with_overrides(
            port=port,
            content_root=Path(content_dir) if content_dir else None,
            security_headers=security_headers,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_root: Path | None = None,
        security_headers: bool | None = None,
    ) -> Config:
        """Create a new Config with overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            content_root: Override content.root
            security_headers: Override server.security_headers

        Returns:
            New Config instance with overrides applied
        """
        server = replace(
            self.server,
            host=host if host is not None else self.server.host,
            port=port if port is not None else self.server.port,
            security_headers=(
                security_headers
                if security_headers is not None
                else self.server.security_headers
            ),
        )

        content = self.content
        if content_root is not None:
            content = replace(self.content, root=content_root)

        return replace(self, server=server, content=content)
