"""Shared test fixtures."""

from pathlib import Path

import pytest
from markserve.config import Config, ContentConfig, ServerConfig


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create an empty content directory."""
    root = tmp_path / "content"
    root.mkdir(exist_ok=True)
    return root


@pytest.fixture
def test_config(content_root: Path) -> Config:
    """Create a test configuration serving content_root with security headers."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(root=content_root),
    )
