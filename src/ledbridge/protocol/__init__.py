"""
LEDSC serial protocol.

Packet structure (both directions)::

    [CMD:param_1:param_2:param_3:param_4]CRC16\\r\\n
     │   └─────────── optional ────────┘ │
     │                                   └─ CRC-16/XMODEM of '[' .. ']', uppercase hex
     └─ command token (CSB, CSE, CSC, CSFP, ...)

Responses carry the status code as the first parameter ("0" = success)::

    [CSB:0]F1F5\\r       success
    [CS:-104]599D\\r     firmware error: missing framing character
"""

from .encoder import (
    EFFECT_VALUES,
    PALETTE_VALUES,
    effect_from_value,
    encode_brightness,
    encode_color,
    encode_debugging,
    encode_effect,
    encode_enter_bootloader,
    encode_fire_palette,
    encode_full_reset,
    encode_get_status,
    encode_print_version,
    palette_from_value,
    percent_to_level,
)
from .response import build_response, decode_command, parse_response
from .versions import KnownProtocolVersion

__all__ = [
    "EFFECT_VALUES",
    "KnownProtocolVersion",
    "PALETTE_VALUES",
    "build_response",
    "decode_command",
    "effect_from_value",
    "encode_brightness",
    "encode_color",
    "encode_debugging",
    "encode_effect",
    "encode_enter_bootloader",
    "encode_fire_palette",
    "encode_full_reset",
    "encode_get_status",
    "encode_print_version",
    "palette_from_value",
    "parse_response",
    "percent_to_level",
]
