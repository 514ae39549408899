"""HTTP boundary for the asset graph."""

from .app import create_app

__all__ = ["create_app"]
