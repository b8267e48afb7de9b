"""Firmware response exceptions.

- DeviceResponseError: Base class for unusable acknowledgments
- DeviceRejectedError: Firmware parsed the command and reported an error code
- ResponseParseError: The acknowledgment line could not be parsed locally
"""

from typing import Optional

from .base import LedBridgeError


class DeviceResponseError(LedBridgeError):
    """The controller answered, but not with a success acknowledgment."""

    category = "protocol"

    def __init__(self, user_message: str, code: int, command: Optional[str] = None, **kwargs):
        super().__init__(user_message, **kwargs)
        self.code = code
        self.command = command


class DeviceRejectedError(DeviceResponseError):
    """Firmware reported a non-zero status for the command."""

    category = "device_rejected"

    def __init__(
        self, code: int, command: Optional[str] = None, response: str = "", recoverable: bool = True
    ):
        super().__init__(
            user_message="The LED controller rejected the command",
            technical_message=f"Firmware returned status {code} for {command}: {response!r}",
            code=code,
            command=command,
            recoverable=recoverable,
        )
        self.response = response


class ResponseParseError(DeviceResponseError):
    """Acknowledgment line is malformed (framing, parameters or CRC)."""

    def __init__(self, code: int, reason: str, response: str = ""):
        super().__init__(
            user_message="Received an unreadable response from the LED controller",
            technical_message=f"Failed to parse response {response!r}: {reason} ({code})",
            code=code,
            recoverable=True,
        )
        self.reason = reason
        self.response = response
