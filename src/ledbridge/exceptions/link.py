"""Serial link exceptions.

This module defines exceptions for the connection to the LED strip controller:
- DeviceConnectionError: The device could not be opened
- DeviceUnavailableError: The device path is missing or already claimed
- TransportError: Base class for faults on an established link
- TransportIOError: A write or read on the port failed
- TransportTimeoutError: The device did not acknowledge in time
- DisconnectedError: The link is closed and could not be reopened
"""

from typing import Optional

from .base import LedBridgeError


class DeviceConnectionError(LedBridgeError):
    """Serial device could not be opened."""

    category = "device_unavailable"

    def __init__(self, user_message: str, port: Optional[str] = None, **kwargs):
        """
        Initialize device connection error.

        Args:
            user_message: User-friendly error message
            port: The serial port path or URL involved
        """
        super().__init__(user_message, **kwargs)
        self.port = port


class DeviceUnavailableError(DeviceConnectionError):
    """Serial device path does not exist or is held by another process."""

    def __init__(self, port: str, original_error: Optional[str] = None):
        user_msg = f"LED controller is not available on {port}"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            port=port,
            recoverable=True,
            recovery_hint=(
                "Check that the controller is plugged in and that no other program "
                "has the port open. Run 'ledbridge ports' to see available ports."
            ),
        )


class TransportError(LedBridgeError):
    """Fault on the serial link while sending a command."""

    category = "transport"

    def __init__(self, user_message: str, command: Optional[str] = None, **kwargs):
        """
        Initialize transport error.

        Args:
            user_message: User-friendly error message
            command: Command token being sent when the fault occurred
        """
        kwargs.setdefault("recoverable", True)
        super().__init__(user_message, **kwargs)
        self.command = command


class TransportIOError(TransportError):
    """Lower-level write/read failure. The link is closed afterwards."""

    category = "io"

    def __init__(self, command: Optional[str] = None, original_error: Optional[str] = None):
        tech_msg = f"Serial I/O failed while sending {command}"
        if original_error:
            tech_msg += f": {original_error}"
        super().__init__(
            user_message="Communication with the LED controller failed",
            technical_message=tech_msg,
            command=command,
            recovery_hint="The link will be reopened on the next request",
        )


class TransportTimeoutError(TransportError):
    """No acknowledgment arrived within the timeout window."""

    category = "timeout"

    def __init__(self, command: Optional[str] = None, timeout: Optional[float] = None, received: str = ""):
        tech_msg = f"No acknowledgment for {command} within {timeout}s"
        if received:
            tech_msg += f" (partial response {received!r})"
        super().__init__(
            user_message="The LED controller did not respond",
            technical_message=tech_msg,
            command=command,
        )
        self.timeout = timeout
        self.received = received


class DisconnectedError(TransportError):
    """The link has been invalidated and could not be reopened."""

    category = "disconnected"

    def __init__(self, command: Optional[str] = None, reason: Optional[str] = None):
        tech_msg = f"Link closed while sending {command}"
        if reason:
            tech_msg += f": {reason}"
        super().__init__(
            user_message="The LED controller is disconnected",
            technical_message=tech_msg,
            command=command,
            recovery_hint="Reconnect the controller and retry the request",
        )
