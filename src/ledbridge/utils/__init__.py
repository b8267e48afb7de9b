"""Utility helpers for ledbridge."""

from .crc import crc16_xmodem
from .persistence import PydanticPersistence

__all__ = ["PydanticPersistence", "crc16_xmodem"]
