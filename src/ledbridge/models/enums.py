"""Enumerations for the LED strip controller protocol."""

from enum import Enum, IntEnum


class Effect(IntEnum):
    """Lighting effects, identified by the firmware's effect id."""

    OFF = 0
    SOLID_COLOR = 1
    RAINBOW_CYCLE = 2
    COMET = 3
    COMET_RAINBOW = 4
    FIRE = 5
    FIRE_WITH_COLOR = 6  # Fire effect tinted with the current color
    SOLID_COLOR_PULSE = 7
    BOUNCING_BALLS = 8
    TWINKLE = 9


class Palette(IntEnum):
    """Fire color palettes, only meaningful while a fire effect is running."""

    HEAT = 0
    PARTY = 1
    RAINBOW = 2
    RAINBOW_STRIPE = 3
    FOREST = 4
    OCEAN = 5
    LAVA = 6
    CLOUD = 7


class CommandCode(str, Enum):
    """Command tokens understood by the LEDSC firmware."""

    PRINT_VERSION = "CPV"
    FULL_RESET = "CFR"
    ENTER_BOOTLOADER = "CEB"
    SET_DEBUGGING = "CSD"
    SET_EFFECT = "CSE"
    SET_COLOR = "CSC"
    SET_BRIGHTNESS = "CSB"
    SET_FIRE_PALETTE = "CSFP"
    GET_STATUS = "CGS"


class LinkState(str, Enum):
    """Lifecycle of the serial link."""

    CLOSED = "closed"
    OPEN = "open"
