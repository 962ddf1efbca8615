"""markserve - serve a directory of markdown files as styled HTML pages."""

__version__ = "0.1.0"
