"""HTTP adapter for the bridge."""

from .app import WELCOME_MESSAGE, create_app

__all__ = ["WELCOME_MESSAGE", "create_app"]
