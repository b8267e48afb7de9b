"""Pytest fixtures for tests."""

import errno
import threading
import time
from collections import deque
from typing import Optional

import pytest
import serial

from ledbridge.link import LinkManager
from ledbridge.models import CommandCode
from ledbridge.protocol import build_response, decode_command

FIRMWARE_VERSION = "LEDSC_TEENSY_001"

# Commands the firmware does not answer (it reboots)
_NO_ACK = {CommandCode.FULL_RESET, CommandCode.ENTER_BOOTLOADER}


class FakeSerialPort:
    """
    In-memory stand-in for a pyserial port.

    By default it plays the firmware: every frame written is decoded and
    answered with a success line. Scripted responses, silence and failures
    can be injected per test.
    """

    def __init__(self, firmware_version: str = FIRMWARE_VERSION):
        self.firmware_version = firmware_version
        self.timeout: Optional[float] = None
        self.is_open = True

        self.written: list[bytes] = []
        self.scripted: deque[bytes] = deque()
        self.silent = False
        self.fail_writes = 0
        self.fail_reads = 0
        self.write_delay = 0.0
        self.response_delay = 0.0

        self.resets = 0
        self.closes = 0
        self.overlaps = 0

        self._rx: deque[bytes] = deque()
        self._inflight = 0
        self._guard = threading.Lock()

    # pyserial API -------------------------------------------------------

    def reset_input_buffer(self):
        self.resets += 1
        self._rx.clear()

    def write(self, data: bytes) -> int:
        if not self.is_open:
            raise serial.SerialException("Attempting to use a port that is not open")
        if self.fail_writes:
            self.fail_writes -= 1
            raise serial.SerialException("write failed: device reports readiness to read but returned no data")

        command = decode_command(data.decode("ascii"))
        acked = command.code not in _NO_ACK
        if acked:
            with self._guard:
                self._inflight += 1
                if self._inflight > 1:
                    self.overlaps += 1

        if self.write_delay:
            time.sleep(self.write_delay)

        self.written.append(data)
        if not acked:
            return len(data)

        if self.scripted:
            self._rx.append(self.scripted.popleft())
        elif not self.silent:
            self._rx.append(self.answer(command.code.value).encode("latin-1"))
        return len(data)

    def flush(self):
        pass

    def read_until(self, expected: bytes = b"\n") -> bytes:
        try:
            if self.fail_reads:
                self.fail_reads -= 1
                raise serial.SerialException("read failed")
            if not self._rx:
                time.sleep(self.timeout or 0)
                return b""
            if self.response_delay:
                time.sleep(self.response_delay)
            return self._rx.popleft()
        finally:
            with self._guard:
                self._inflight = max(0, self._inflight - 1)

    def close(self):
        self.closes += 1
        self.is_open = False

    # Helpers ------------------------------------------------------------

    def answer(self, token: str) -> str:
        if token == CommandCode.PRINT_VERSION.value:
            return build_response(token, 0, self.firmware_version)
        if token == CommandCode.GET_STATUS.value:
            return build_response(token, 0, "5", "BF")
        return build_response(token, 0)

    def script(self, *lines: str):
        """Queue raw response lines, used instead of the automatic answers."""
        for line in lines:
            self.scripted.append(line.encode("latin-1"))

    def preload(self, line: str):
        """Put a stale line in the input buffer."""
        self._rx.append(line.encode("latin-1"))

    @property
    def frames(self) -> list[str]:
        return [w.decode("ascii") for w in self.written]


class FakeSerialFactory:
    """Port factory handing out one FakeSerialPort, with injectable open failures."""

    def __init__(self, port: FakeSerialPort):
        self.port = port
        self.opens = 0
        self.fail_opens = 0

    def __call__(self) -> FakeSerialPort:
        if self.fail_opens:
            self.fail_opens -= 1
            raise serial.SerialException(
                errno.ENOENT, "could not open port /dev/ttyFAKE: [Errno 2] No such file or directory"
            )
        self.opens += 1
        self.port.is_open = True
        return self.port


@pytest.fixture
def fake_port():
    """A fake serial port answering like LEDSC_TEENSY_001 firmware."""
    return FakeSerialPort()


@pytest.fixture
def port_factory(fake_port):
    return FakeSerialFactory(fake_port)


@pytest.fixture
def link(port_factory):
    """An unopened LinkManager on the fake port with a short ack timeout."""
    manager = LinkManager("/dev/ttyFAKE", ack_timeout=0.05, port_factory=port_factory)
    yield manager
    manager.close()


@pytest.fixture
def open_link(link):
    link.open()
    return link
