"""Data models for the LED strip bridge."""

from .color import Color
from .command import Ack, Command, ResponsePacket
from .config import BridgeConfig
from .enums import CommandCode, Effect, LinkState, Palette

__all__ = [
    "Ack",
    "BridgeConfig",
    "Color",
    "Command",
    "CommandCode",
    # Enums
    "Effect",
    "LinkState",
    "Palette",
    "ResponsePacket",
]
