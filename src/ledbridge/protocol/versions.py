"""Known firmware protocol versions."""

from enum import Enum

from ledbridge.models.enums import CommandCode

LEDSC_TEENSY_PREFIX = "LEDSC_TEENSY_"

# Implemented by the protocol but answered with "not implemented" on 001
_TEENSY_001_UNSUPPORTED = frozenset({CommandCode.FULL_RESET, CommandCode.ENTER_BOOTLOADER})


class KnownProtocolVersion(str, Enum):
    """Firmware families this bridge knows how to talk to."""

    UNKNOWN = "UNKNOWN"
    LEDSC_TEENSY_001 = "LEDSC_TEENSY_001"
    LEDSC_TEENSY_NEWER = LEDSC_TEENSY_PREFIX  # A LEDSC_TEENSY_* newer than this bridge

    @classmethod
    def from_version_string(cls, version: str) -> "KnownProtocolVersion":
        """
        Match a firmware version string (case-insensitive).

        Example:
            >>> KnownProtocolVersion.from_version_string("Ledsc_teensy_001")
            <KnownProtocolVersion.LEDSC_TEENSY_001: 'LEDSC_TEENSY_001'>
        """
        upper = version.strip().upper()
        if upper == cls.LEDSC_TEENSY_001.value:
            return cls.LEDSC_TEENSY_001
        if LEDSC_TEENSY_PREFIX in upper:
            return cls.LEDSC_TEENSY_NEWER
        return cls.UNKNOWN

    def supports(self, code: CommandCode) -> bool:
        """Whether this firmware accepts the command.

        Newer firmware is spoken to with the 001 command set; unknown firmware
        is not second-guessed.
        """
        if self is KnownProtocolVersion.UNKNOWN:
            return True
        return code not in _TEENSY_001_UNSUPPORTED
