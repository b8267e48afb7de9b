"""Parsing of framed packets coming back from (or going to) the firmware."""

import logging

from ledbridge.exceptions import ResponseParseError
from ledbridge.models.command import ETX, PSC, STX, Command, ResponsePacket
from ledbridge.models.enums import CommandCode
from ledbridge.utils.crc import crc16_xmodem

logger = logging.getLogger(__name__)

# Local parse error codes, same numbering the firmware uses
ERR_MISSING_STX = -101
ERR_MISSING_ETX = -102
ERR_CMD_UNKNOWN = -107
ERR_MISSING_PARAMS = -108
ERR_CRC16_MISMATCH = -110
ERR_MISSING_CRC16 = -111


def _split_frame(text: str) -> tuple[str, list[str], int, int]:
    """Split '[CMD:p1:p2]CRC' into (command, params, crc_in, crc_calc)."""
    text = text.strip()

    if not text.startswith(STX):
        raise ResponseParseError(ERR_MISSING_STX, "missing '['", text)

    end = text.find(ETX)
    if end == -1:
        raise ResponseParseError(ERR_MISSING_ETX, "missing ']'", text)

    command, *params = text[1:end].split(PSC)

    crc_str = text[end + 1:].strip()
    if not crc_str:
        raise ResponseParseError(ERR_MISSING_CRC16, "missing CRC16", text)
    try:
        crc_in = int(crc_str, 16)
    except ValueError:
        raise ResponseParseError(ERR_MISSING_CRC16, f"unreadable CRC16 {crc_str!r}", text) from None

    crc_calc = crc16_xmodem(text[:end + 1].encode("latin-1", errors="replace"))
    if crc_in != crc_calc:
        raise ResponseParseError(
            ERR_CRC16_MISMATCH, f"CRC16 {crc_in:04X} != computed {crc_calc:04X}", text
        )

    return command, params, crc_in, crc_calc


def parse_response(text: str) -> ResponsePacket:
    """
    Parse a firmware response line such as '[CSE:0]A0D8'.

    The packet is returned whether the status is success or a firmware error
    code; callers check `packet.succeeded`.

    Raises:
        ResponseParseError: On framing, parameter or CRC problems
    """
    command, params, crc_in, crc_calc = _split_frame(text)

    if not params:
        # Every response carries at least the status code
        raise ResponseParseError(ERR_MISSING_PARAMS, "missing status parameter", text)

    packet = ResponsePacket(
        command=command, parameters=tuple(params), crc16_in=crc_in, crc16_calc=crc_calc
    )
    logger.debug(f"Parsed response {packet.command} status={packet.parameters[0]}")
    return packet


def decode_command(frame: str) -> Command:
    """
    Parse a request frame such as '[CSB:5C]4AEA\\r\\n' back into a Command.

    Used by diagnostics and test doubles that play the firmware's side.
    """
    command, params, _, _ = _split_frame(frame)
    try:
        code = CommandCode(command)
    except ValueError:
        raise ResponseParseError(ERR_CMD_UNKNOWN, f"unknown command {command!r}", frame) from None
    return Command(code=code, params=tuple(params))


def build_response(command: str, status: int = 0, *params: str) -> str:
    """Frame a response line the way the firmware does (CR terminated)."""
    body = STX + PSC.join([command, str(status), *params]) + ETX
    return f"{body}{crc16_xmodem(body.encode('latin-1')):X}\r"
