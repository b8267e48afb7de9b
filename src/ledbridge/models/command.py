"""Command and acknowledgment models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ledbridge.models.enums import CommandCode
from ledbridge.utils.crc import crc16_xmodem

# Framing characters
STX = "["
ETX = "]"
PSC = ":"
CR = "\r"
NL = "\n"


class Command(BaseModel):
    """A single self-contained command for the controller.

    Request packet structure::

        [CMD:param_1:param_2:...]CRC16\\r\\n

    The CRC is CRC-16/XMODEM over everything from '[' to ']' inclusive,
    written as uppercase hex without padding.
    """

    model_config = ConfigDict(frozen=True)

    code: CommandCode
    params: tuple[str, ...] = ()
    expects_ack: bool = Field(
        default=True,
        description="Wait for the firmware's response line after writing",
    )

    def body(self) -> str:
        """Return the framed part covered by the CRC, e.g. '[CSB:BF]'."""
        return STX + self.code.value + "".join(PSC + p for p in self.params) + ETX

    def frame(self) -> str:
        """Return the complete wire string including CRC and line ending."""
        body = self.body()
        return f"{body}{crc16_xmodem(body.encode('ascii')):X}{CR}{NL}"

    def to_bytes(self) -> bytes:
        """Encode the frame for writing to the serial port."""
        return self.frame().encode("ascii")

    def __str__(self) -> str:
        return self.body()


class ResponsePacket(BaseModel):
    """A parsed response line from the firmware.

    Response packet structure::

        [CMD:status:param_2:...]CRC16\\r

    The first parameter is always the status code, "0" meaning success.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    parameters: tuple[str, ...]
    crc16_in: int
    crc16_calc: int

    @property
    def status_code(self) -> Optional[int]:
        """Status parameter as an integer, None if it is not numeric."""
        try:
            return int(self.parameters[0])
        except (IndexError, ValueError):
            return None

    @property
    def succeeded(self) -> bool:
        return self.status_code == 0

    @property
    def payload(self) -> tuple[str, ...]:
        """Parameters after the status code."""
        return self.parameters[1:]


class Ack(BaseModel):
    """Result of a successful send."""

    model_config = ConfigDict(frozen=True)

    command: Command
    response: Optional[ResponsePacket] = None
    raw: str = ""
