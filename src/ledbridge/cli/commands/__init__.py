"""CLI commands for ledbridge."""

from .config import config
from .device import ports, probe
from .send import send_group
from .serve import serve

__all__ = ["config", "ports", "probe", "send_group", "serve"]
