"""Serial link to the LED strip controller."""

from .manager import LinkManager, PortInfo

__all__ = ["LinkManager", "PortInfo"]
