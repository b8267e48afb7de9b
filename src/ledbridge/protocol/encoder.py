"""
Protocol encoder for the LEDSC firmware.

Pure functions from validated domain values to framed commands. Nothing in
this module touches the serial port.

Encoding Flow
-------------

::

    encode_brightness(75)
          ↓
    level = 75 * 255 // 100          # firmware wants a byte, 191
          ↓
    Command(code=CSB, params=("BF",))
          ↓
    Command.frame()
    "[CSB:BF]" + crc16_xmodem("[CSB:BF]") + "\\r\\n"

Parameters are uppercase hex without zero padding: effect 4 is "4",
color 0x004F2D86 is "4F2D86", brightness 92 is "5C".

Mapping Tables
--------------

Effects and palettes map to firmware values through explicit tables. The
tables are checked against their enums at import time, so adding an enum
member without a firmware value fails on startup instead of sending garbage.
"""

from enum import IntEnum
from typing import Union

from ledbridge.exceptions import ValidationError
from ledbridge.models.color import Color
from ledbridge.models.command import Command
from ledbridge.models.enums import CommandCode, Effect, Palette

BRIGHTNESS_MIN = 0
BRIGHTNESS_MAX = 100

EFFECT_VALUES: dict[Effect, int] = {
    Effect.OFF: 0x00,
    Effect.SOLID_COLOR: 0x01,
    Effect.RAINBOW_CYCLE: 0x02,
    Effect.COMET: 0x03,
    Effect.COMET_RAINBOW: 0x04,
    Effect.FIRE: 0x05,
    Effect.FIRE_WITH_COLOR: 0x06,
    Effect.SOLID_COLOR_PULSE: 0x07,
    Effect.BOUNCING_BALLS: 0x08,
    Effect.TWINKLE: 0x09,
}

PALETTE_VALUES: dict[Palette, int] = {
    Palette.HEAT: 0x00,
    Palette.PARTY: 0x01,
    Palette.RAINBOW: 0x02,
    Palette.RAINBOW_STRIPE: 0x03,
    Palette.FOREST: 0x04,
    Palette.OCEAN: 0x05,
    Palette.LAVA: 0x06,
    Palette.CLOUD: 0x07,
}


def _check_table(table: dict, enum_type: type[IntEnum]) -> None:
    missing = set(enum_type) - set(table)
    if missing:
        names = ", ".join(sorted(m.name for m in missing))
        raise RuntimeError(f"No firmware value for {enum_type.__name__}: {names}")
    if len(set(table.values())) != len(table):
        raise RuntimeError(f"Duplicate firmware values in {enum_type.__name__} table")


_check_table(EFFECT_VALUES, Effect)
_check_table(PALETTE_VALUES, Palette)


def _hex(value: int) -> str:
    return format(value, "X")


def percent_to_level(percent: int) -> int:
    """Scale a 0-100 percentage to the firmware's 0-255 brightness byte (truncating)."""
    return percent * 255 // 100


def encode_brightness(percent: int) -> Command:
    """
    Build the set-brightness command.

    Raises:
        ValidationError: If percent is not an integer in [0, 100]. Never clamps.
    """
    if isinstance(percent, bool) or not isinstance(percent, int):
        raise ValidationError("brightness_percent", percent, "must be an integer")
    if not BRIGHTNESS_MIN <= percent <= BRIGHTNESS_MAX:
        raise ValidationError(
            "brightness_percent", percent, f"must be between {BRIGHTNESS_MIN} and {BRIGHTNESS_MAX}"
        )
    return Command(code=CommandCode.SET_BRIGHTNESS, params=(_hex(percent_to_level(percent)),))


def encode_effect(effect: Effect) -> Command:
    """Build the set-effect command."""
    if not isinstance(effect, Effect):
        raise ValidationError("effect_id", effect, "not a known effect")
    return Command(code=CommandCode.SET_EFFECT, params=(_hex(EFFECT_VALUES[effect]),))


def encode_color(color: Union[Color, tuple[int, int, int]]) -> Command:
    """Build the set-color command from a Color or an (r, g, b) tuple."""
    if not isinstance(color, Color):
        try:
            r, g, b = color
        except (TypeError, ValueError):
            raise ValidationError("color", color, "expected an (r, g, b) triple") from None
        for channel in (r, g, b):
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise ValidationError("color", color, "channels must be integers 0-255")
        color = Color(r=r, g=g, b=b)
    return Command(code=CommandCode.SET_COLOR, params=(_hex(color.to_u32()),))


def encode_fire_palette(palette: Palette) -> Command:
    """Build the set-fire-palette command."""
    if not isinstance(palette, Palette):
        raise ValidationError("palette_id", palette, "not a known fire palette")
    return Command(code=CommandCode.SET_FIRE_PALETTE, params=(_hex(PALETTE_VALUES[palette]),))


def encode_debugging(enabled: bool) -> Command:
    """Build the set-debugging command. The firmware expects a literal 0x01/0x00."""
    return Command(code=CommandCode.SET_DEBUGGING, params=("0x01" if enabled else "0x00",))


def encode_print_version() -> Command:
    return Command(code=CommandCode.PRINT_VERSION)


def encode_get_status() -> Command:
    return Command(code=CommandCode.GET_STATUS)


def encode_full_reset() -> Command:
    # Controller reboots instead of answering
    return Command(code=CommandCode.FULL_RESET, expects_ack=False)


def encode_enter_bootloader() -> Command:
    # Controller reboots instead of answering
    return Command(code=CommandCode.ENTER_BOOTLOADER, expects_ack=False)


def effect_from_value(value: int) -> Effect:
    """Reverse lookup of EFFECT_VALUES. Raises KeyError for unknown values."""
    return _EFFECTS_BY_VALUE[value]


def palette_from_value(value: int) -> Palette:
    """Reverse lookup of PALETTE_VALUES. Raises KeyError for unknown values."""
    return _PALETTES_BY_VALUE[value]


_EFFECTS_BY_VALUE = {v: k for k, v in EFFECT_VALUES.items()}
_PALETTES_BY_VALUE = {v: k for k, v in PALETTE_VALUES.items()}
