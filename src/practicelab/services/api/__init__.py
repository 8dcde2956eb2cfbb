"""HTTP API for skill scoring, role resolution and exercise routing."""

from .main import app, create_app

__all__ = ["app", "create_app"]
