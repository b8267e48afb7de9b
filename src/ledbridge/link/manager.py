"""
Serial link manager for the LED strip controller.

Owns the one physical connection and gives mutually exclusive, fault-aware
access to it.

Lifecycle
---------

::

    CLOSED ──open()──▶ OPEN ──I/O error──▶ CLOSED
       ▲                 │                   │
       └────close()──────┘      next send(): one reopen attempt
                                 success → write, failure → DisconnectedError

There is no background reconnect loop. A broken link is only reopened by the
next caller, so a dead controller shows up as failed requests rather than as
a busy thread.

Send Flow
---------

::

    send(command)
      ├─ acquire lock                (callers queue here, FIFO-ish)
      ├─ reopen if CLOSED            (exactly one attempt)
      ├─ reset input buffer          (drop stale lines)
      ├─ write frame + flush         (never interrupted once started)
      ├─ read until '\\r'            (bounded by ack_timeout)
      ├─ parse + check status
      └─ release lock                (on every exit path)
"""

import logging
import threading
from typing import Callable, NamedTuple, Optional

import serial
from serial.tools import list_ports

from ledbridge.exceptions import (
    DeviceConnectionError,
    DeviceRejectedError,
    DisconnectedError,
    ErrorContext,
    ResponseParseError,
    TransportIOError,
    TransportTimeoutError,
    handle_errors,
    wrap_serial_error,
)
from ledbridge.models import Ack, BridgeConfig, Command, LinkState
from ledbridge.protocol import KnownProtocolVersion, encode_print_version, parse_response
from ledbridge.protocol.response import ERR_CMD_UNKNOWN, ERR_MISSING_PARAMS

logger = logging.getLogger(__name__)

RESPONSE_TERMINATOR = b"\r"

# Local code for commands the connected firmware does not implement
ERR_CMD_NOT_IMPLEMENTED = -106


class PortInfo(NamedTuple):
    """A serial port as reported by the OS."""

    device: str
    description: str


class LinkManager:
    """
    Exclusive owner of the serial connection to the controller.

    All access to the port goes through `send()`, which holds a lock for the
    whole write-and-acknowledge exchange. At most one command is on the wire
    at any time and commands are applied in lock-acquisition order.
    """

    def __init__(
        self,
        port: str,
        baud_rate: int = 115200,
        ack_timeout: float = 0.5,
        write_timeout: float = 1.0,
        port_factory: Optional[Callable[[], serial.SerialBase]] = None,
    ):
        """
        Initialize the link manager. The port is not opened here.

        Args:
            port: Serial device path or pyserial URL
            baud_rate: Serial baud rate
            ack_timeout: Seconds to wait for an acknowledgment per send
            write_timeout: Seconds before a blocked write fails
            port_factory: Callable returning an open port object. Defaults to
                          pyserial's serial_for_url with the settings above.
        """
        self._port_name = port
        self._baud_rate = baud_rate
        self._ack_timeout = ack_timeout
        self._write_timeout = write_timeout
        self._port_factory = port_factory or self._open_serial

        self._port: Optional[serial.SerialBase] = None
        self._lock = threading.Lock()
        self._shutdown = False

        self._firmware_version: Optional[str] = None
        self._protocol_version = KnownProtocolVersion.UNKNOWN

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "LinkManager":
        return cls(
            port=config.serial_port,
            baud_rate=config.baud_rate,
            ack_timeout=config.ack_timeout,
            write_timeout=config.write_timeout,
        )

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def _open_serial(self) -> serial.SerialBase:
        return serial.serial_for_url(
            self._port_name,
            baudrate=self._baud_rate,
            timeout=self._ack_timeout,
            write_timeout=self._write_timeout,
            exclusive=True,
        )

    def open(self) -> None:
        """
        Open the serial device.

        Raises:
            DeviceUnavailableError: If the path is missing or held by another process
            DeviceConnectionError: For other open failures
        """
        with self._lock:
            self._shutdown = False
            self._open_locked()

    def _open_locked(self) -> None:
        """Open the port. Must be called with _lock held."""
        if self._port is not None:
            return

        try:
            port = self._port_factory()
        except (serial.SerialException, OSError, ValueError) as e:
            raise wrap_serial_error(e, self._port_name) from e

        # The acknowledgment bound is per send, regardless of who built the port
        port.timeout = self._ack_timeout
        self._port = port
        logger.info(f"Serial link open: {self._port_name} @ {self._baud_rate} baud")

    def start(self) -> bool:
        """
        Open the link at process start.

        Failure is logged and not raised; the first send will try again.

        Returns:
            True if the link is open
        """
        with ErrorContext("open serial link", logger_instance=logger, re_raise=False) as ctx:
            self.open()

        if ctx.error is not None:
            logger.warning(f"Starting with serial link closed ({self._port_name})")
        return ctx.error is None

    def close(self) -> None:
        """Close the link for shutdown. Subsequent sends fail with DisconnectedError."""
        with self._lock:
            self._shutdown = True
            self._close_locked()
        logger.info(f"Serial link shut down: {self._port_name}")

    def _close_locked(self) -> None:
        """Drop the port handle. Must be called with _lock held."""
        if self._port is None:
            return
        try:
            self._port.close()
        except (serial.SerialException, OSError) as e:
            logger.warning(f"Error closing serial port {self._port_name}: {e}")
        self._port = None
        logger.debug(f"Serial link closed: {self._port_name}")

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    # ================================================================
    # SENDING
    # ================================================================

    def send(self, command: Command) -> Ack:
        """
        Write a command and, if it expects one, wait for the acknowledgment.

        Args:
            command: Encoded command to send

        Returns:
            Ack with the parsed response (None for fire-and-forget commands)

        Raises:
            DisconnectedError: Link is shut down, or closed and the reopen failed
            TransportIOError: Write/read failed; the link is now closed
            TransportTimeoutError: No acknowledgment within ack_timeout
            DeviceRejectedError: Firmware answered with a non-zero status
            ResponseParseError: Firmware answer could not be parsed
        """
        token = command.code.value
        frame = command.to_bytes()

        with self._lock:
            if self._shutdown:
                raise DisconnectedError(token, "link has been shut down")

            if self._port is None:
                logger.info(f"Serial link closed, reopening {self._port_name}")
                try:
                    self._open_locked()
                except DeviceConnectionError as e:
                    logger.warning(f"Reopen of {self._port_name} failed: {e.log_line()}")
                    raise DisconnectedError(token, e.technical_message) from e

            if not self._protocol_version.supports(command.code):
                raise DeviceRejectedError(
                    ERR_CMD_NOT_IMPLEMENTED, token, f"not supported by {self._firmware_version}",
                    recoverable=False,
                )

            port = self._port
            try:
                port.reset_input_buffer()
                port.write(frame)
                port.flush()
            except (serial.SerialException, OSError) as e:
                self._close_locked()
                logger.error(f"Write of {command} to {self._port_name} failed: {e}")
                raise TransportIOError(token, str(e)) from e

            logger.debug(f"Sent {frame!r}")

            if not command.expects_ack:
                return Ack(command=command)

            raw = self._read_response(port, token)

        return self._check_response(command, raw)

    def _read_response(self, port: serial.SerialBase, token: str) -> str:
        """Read one CR-terminated response line. Must be called with _lock held."""
        try:
            data = port.read_until(RESPONSE_TERMINATOR)
        except (serial.SerialException, OSError) as e:
            self._close_locked()
            logger.error(f"Read from {self._port_name} failed: {e}")
            raise TransportIOError(token, str(e)) from e

        text = data.decode("latin-1")
        if not data.endswith(RESPONSE_TERMINATOR):
            logger.warning(f"No acknowledgment for {token} within {self._ack_timeout}s")
            raise TransportTimeoutError(token, self._ack_timeout, text.strip())

        logger.debug(f"Received {data!r}")
        return text

    def _check_response(self, command: Command, raw: str) -> Ack:
        token = command.code.value
        packet = parse_response(raw)

        if packet.status_code is None:
            raise ResponseParseError(
                ERR_MISSING_PARAMS, f"non-numeric status {packet.parameters[0]!r}", raw.strip()
            )

        if not packet.succeeded:
            raise DeviceRejectedError(packet.status_code, token, raw.strip())

        if packet.command != token:
            raise ResponseParseError(
                ERR_CMD_UNKNOWN, f"response for {packet.command} while waiting for {token}", raw.strip()
            )

        return Ack(command=command, response=packet, raw=raw.strip())

    def probe_version(self) -> str:
        """
        Ask the firmware for its version and remember the protocol family.

        Returns:
            The version string reported by the firmware (may be empty)
        """
        ack = self.send(encode_print_version())
        payload = ack.response.payload if ack.response else ()
        version = payload[0] if payload else ""

        with self._lock:
            self._firmware_version = version
            self._protocol_version = KnownProtocolVersion.from_version_string(version)

        logger.info(f"Firmware version: {version or '(none)'} ({self._protocol_version.name})")
        return version

    # ================================================================
    # STATE
    # ================================================================

    @property
    def state(self) -> LinkState:
        return LinkState.OPEN if self._port is not None else LinkState.CLOSED

    @property
    def is_open(self) -> bool:
        return self._port is not None

    @property
    def port_name(self) -> str:
        return self._port_name

    @property
    def ack_timeout(self) -> float:
        return self._ack_timeout

    @property
    def firmware_version(self) -> Optional[str]:
        return self._firmware_version

    @property
    def protocol_version(self) -> KnownProtocolVersion:
        return self._protocol_version

    @staticmethod
    @handle_errors(operation_name="list serial ports", fallback_value=[], re_raise=False)
    def list_ports() -> list[PortInfo]:
        """List serial ports present on this machine. Nothing is opened."""
        return [PortInfo(p.device, p.description) for p in sorted(list_ports.comports())]
