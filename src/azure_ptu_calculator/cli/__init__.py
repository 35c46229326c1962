"""Azure PTU calculator CLI package."""

from .app import app

__all__ = ["app"]
