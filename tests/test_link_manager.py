"""Tests for LinkManager."""

import os
import threading
import time

import pytest
import serial

from ledbridge.exceptions import (
    DeviceRejectedError,
    DeviceUnavailableError,
    DisconnectedError,
    ResponseParseError,
    TransportIOError,
    TransportTimeoutError,
)
from ledbridge.link import LinkManager
from ledbridge.models import BridgeConfig, Effect, LinkState
from ledbridge.protocol import (
    KnownProtocolVersion,
    build_response,
    encode_brightness,
    encode_effect,
    encode_full_reset,
)
from ledbridge.protocol.response import ERR_MISSING_PARAMS


@pytest.mark.unit
class TestLifecycle:
    """Test opening and closing the link."""

    def test_starts_closed(self, link):
        """Test the port is not opened in the constructor."""
        assert link.state is LinkState.CLOSED
        assert not link.is_open

    def test_open_and_close(self, link, port_factory, fake_port):
        """Test open() claims the port and close() releases it."""
        link.open()
        assert link.state is LinkState.OPEN
        assert port_factory.opens == 1
        assert fake_port.timeout == link.ack_timeout

        link.close()
        assert link.state is LinkState.CLOSED
        assert fake_port.closes == 1

    def test_open_is_idempotent(self, open_link, port_factory):
        """Test opening an open link does nothing."""
        open_link.open()
        assert port_factory.opens == 1

    def test_context_manager(self, port_factory):
        """Test the link closes on context exit."""
        with LinkManager("/dev/ttyFAKE", port_factory=port_factory) as link:
            assert link.is_open
        assert not link.is_open

    def test_open_failure(self, link, port_factory):
        """Test open() raises DeviceUnavailableError for a missing device."""
        port_factory.fail_opens = 1
        with pytest.raises(DeviceUnavailableError) as exc_info:
            link.open()
        assert exc_info.value.port == "/dev/ttyFAKE"
        assert exc_info.value.recovery_hint

    def test_start_failure_is_not_fatal(self, link, port_factory):
        """Test start() logs and returns False when the device is missing."""
        port_factory.fail_opens = 1
        assert link.start() is False
        assert link.state is LinkState.CLOSED

    def test_start_success(self, link):
        """Test start() opens the link."""
        assert link.start() is True
        assert link.is_open

    def test_missing_device_path(self, tmp_path):
        """Test a real open of a path that does not exist."""
        link = LinkManager(str(tmp_path / "ttyNOPE"))
        with pytest.raises(DeviceUnavailableError):
            link.open()

    def test_from_config(self):
        """Test the link picks up serial settings from the config."""
        config = BridgeConfig(serial_port="/dev/ttyUSB3", ack_timeout=0.25)
        link = LinkManager.from_config(config)
        assert link.port_name == "/dev/ttyUSB3"
        assert link.ack_timeout == 0.25

    def test_list_ports(self):
        """Test listing ports returns a list without opening anything."""
        assert isinstance(LinkManager.list_ports(), list)


@pytest.mark.unit
class TestSend:
    """Test the write-and-acknowledge exchange."""

    def test_send_writes_exact_frame(self, open_link, fake_port):
        """Test a brightness command is written byte for byte."""
        ack = open_link.send(encode_brightness(75))

        assert fake_port.written == [encode_brightness(75).to_bytes()]
        assert fake_port.frames[0].startswith("[CSB:BF]")
        assert ack.response.succeeded
        assert ack.response.command == "CSB"

    def test_input_buffer_reset_before_write(self, open_link, fake_port):
        """Test a stale line is not mistaken for the acknowledgment."""
        fake_port.preload(build_response("CSE", -107))
        ack = open_link.send(encode_brightness(10))
        assert ack.response.command == "CSB"
        assert fake_port.resets == 1

    def test_send_opens_closed_link(self, link, port_factory):
        """Test the first send opens a link that was never opened."""
        link.send(encode_brightness(10))
        assert port_factory.opens == 1
        assert link.is_open

    def test_device_rejects(self, open_link, fake_port):
        """Test a non-zero status raises DeviceRejectedError."""
        fake_port.script(build_response("CSE", -109))
        with pytest.raises(DeviceRejectedError) as exc_info:
            open_link.send(encode_effect(Effect.FIRE))
        assert exc_info.value.code == -109
        assert exc_info.value.category == "device_rejected"
        assert open_link.is_open

    def test_response_for_other_command(self, open_link, fake_port):
        """Test an acknowledgment for a different command is a protocol error."""
        fake_port.script(build_response("CSE", 0))
        with pytest.raises(ResponseParseError):
            open_link.send(encode_brightness(10))

    def test_non_numeric_status(self, open_link, fake_port):
        """Test a status field that is not a number is a protocol error."""
        fake_port.script(build_response("CSB", "BF"))
        with pytest.raises(ResponseParseError) as exc_info:
            open_link.send(encode_brightness(10))
        assert exc_info.value.code == ERR_MISSING_PARAMS
        assert exc_info.value.category == "protocol"
        assert not isinstance(exc_info.value, DeviceRejectedError)

    def test_corrupted_response(self, open_link, fake_port):
        """Test a CRC mismatch is a protocol error."""
        fake_port.script("[CSB:0]0000\r")
        with pytest.raises(ResponseParseError):
            open_link.send(encode_brightness(10))

    def test_fire_and_forget(self, open_link, fake_port):
        """Test reset does not wait for an answer on unknown firmware."""
        start = time.monotonic()
        ack = open_link.send(encode_full_reset())
        assert ack.response is None
        assert fake_port.frames == ["[CFR]4005\r\n"]
        assert time.monotonic() - start < open_link.ack_timeout


@pytest.mark.unit
class TestFailures:
    """Test timeout, I/O failure and reconnection."""

    def test_timeout_is_bounded(self, open_link, fake_port):
        """Test a silent device fails within the ack timeout and the link stays open."""
        fake_port.silent = True

        start = time.monotonic()
        with pytest.raises(TransportTimeoutError) as exc_info:
            open_link.send(encode_brightness(50))
        elapsed = time.monotonic() - start

        assert open_link.ack_timeout <= elapsed < open_link.ack_timeout + 0.5
        assert exc_info.value.category == "timeout"
        assert open_link.is_open

    @pytest.mark.integration
    @pytest.mark.skipif(os.name != "posix", reason="needs a pseudo-terminal")
    def test_timeout_on_real_port(self):
        """Test pyserial's read_until honours the ack timeout on a silent tty."""
        master, slave = os.openpty()
        name = os.ttyname(slave)
        # The factory asks for a long timeout; the link must override it
        link = LinkManager(name, ack_timeout=0.2, port_factory=lambda: serial.serial_for_url(name, timeout=5.0))
        try:
            link.open()
            start = time.monotonic()
            with pytest.raises(TransportTimeoutError):
                link.send(encode_brightness(50))
            elapsed = time.monotonic() - start
        finally:
            link.close()
            os.close(slave)
            os.close(master)

        assert 0.2 <= elapsed < 1.5

    def test_write_failure_closes_link(self, open_link, fake_port):
        """Test an I/O error closes the link."""
        fake_port.fail_writes = 1
        with pytest.raises(TransportIOError) as exc_info:
            open_link.send(encode_brightness(50))
        assert exc_info.value.category == "io"
        assert open_link.state is LinkState.CLOSED

    def test_read_failure_closes_link(self, open_link, fake_port):
        """Test a failed read closes the link."""
        fake_port.fail_reads = 1
        with pytest.raises(TransportIOError):
            open_link.send(encode_brightness(50))
        assert not open_link.is_open

    def test_reopen_once_recovers(self, open_link, fake_port, port_factory):
        """Test the next send after a failure reopens and succeeds."""
        fake_port.fail_writes = 1
        with pytest.raises(TransportIOError):
            open_link.send(encode_brightness(50))

        ack = open_link.send(encode_brightness(60))

        assert ack.response.succeeded
        assert port_factory.opens == 2
        assert open_link.is_open

    def test_failed_reopen_is_disconnected(self, open_link, fake_port, port_factory):
        """Test exactly one reopen attempt per send, then DisconnectedError."""
        fake_port.fail_writes = 1
        with pytest.raises(TransportIOError):
            open_link.send(encode_brightness(50))

        port_factory.fail_opens = 1
        with pytest.raises(DisconnectedError) as exc_info:
            open_link.send(encode_brightness(60))
        assert exc_info.value.category == "disconnected"
        assert open_link.state is LinkState.CLOSED
        assert port_factory.fail_opens == 0

        # Device is back: the following send recovers
        assert open_link.send(encode_brightness(70)).response.succeeded

    def test_send_after_shutdown(self, open_link, fake_port):
        """Test sends fail after close() without touching the port."""
        open_link.close()
        with pytest.raises(DisconnectedError):
            open_link.send(encode_brightness(50))
        assert fake_port.written == []


@pytest.mark.unit
class TestProbeVersion:
    """Test firmware version discovery."""

    def test_probe_known_version(self, open_link):
        """Test 001 firmware is recognised."""
        assert open_link.probe_version() == "LEDSC_TEENSY_001"
        assert open_link.firmware_version == "LEDSC_TEENSY_001"
        assert open_link.protocol_version is KnownProtocolVersion.LEDSC_TEENSY_001

    def test_unsupported_command_not_written(self, open_link, fake_port):
        """Test commands unsupported by the firmware are refused locally."""
        open_link.probe_version()
        with pytest.raises(DeviceRejectedError):
            open_link.send(encode_full_reset())
        assert all(not f.startswith("[CFR]") for f in fake_port.frames)

    def test_probe_newer_version(self, open_link, fake_port):
        """Test a newer Teensy firmware is classified as such."""
        fake_port.firmware_version = "LEDSC_TEENSY_003"
        open_link.probe_version()
        assert open_link.protocol_version is KnownProtocolVersion.LEDSC_TEENSY_NEWER


@pytest.mark.integration
class TestMutualExclusion:
    """Test concurrent senders never interleave on the wire."""

    def test_concurrent_sends(self, open_link, fake_port):
        """Test N threads sending at once produce N intact exchanges."""
        fake_port.write_delay = 0.001
        threads_count = 8
        per_thread = 10
        errors = []
        barrier = threading.Barrier(threads_count)

        def worker(i: int):
            barrier.wait()
            for j in range(per_thread):
                try:
                    ack = open_link.send(encode_brightness((i * per_thread + j) % 101))
                    assert ack.response.command == "CSB"
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []
        assert fake_port.overlaps == 0
        assert len(fake_port.written) == threads_count * per_thread
        expected = {encode_brightness(p).to_bytes() for p in range(101)}
        assert all(frame in expected for frame in fake_port.written)
