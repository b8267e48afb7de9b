"""Tests for response parsing and protocol versions."""

import pytest

from ledbridge.exceptions import ResponseParseError
from ledbridge.models import CommandCode, ResponsePacket
from ledbridge.protocol import KnownProtocolVersion, build_response, decode_command, parse_response
from ledbridge.protocol.response import (
    ERR_CMD_UNKNOWN,
    ERR_CRC16_MISMATCH,
    ERR_MISSING_CRC16,
    ERR_MISSING_ETX,
    ERR_MISSING_PARAMS,
    ERR_MISSING_STX,
)
from ledbridge.utils import crc16_xmodem


@pytest.mark.unit
class TestParseResponse:
    """Test parsing of firmware response lines."""

    def test_success(self):
        """Test a success acknowledgment."""
        packet = parse_response("[CSE:0]A0D8\r")
        assert packet.command == "CSE"
        assert packet.parameters == ("0",)
        assert packet.status_code == 0
        assert packet.succeeded
        assert packet.crc16_in == packet.crc16_calc == 0xA0D8

    def test_brightness_ack(self):
        """Test the brightness acknowledgment from the firmware."""
        assert parse_response("[CSB:0]F1F5").succeeded

    def test_firmware_error(self):
        """Test an error line is returned, not raised."""
        packet = parse_response("[CS:-104]599D\r")
        assert packet.status_code == -104
        assert not packet.succeeded

    def test_payload(self):
        """Test parameters after the status code."""
        packet = parse_response(build_response("CPV", 0, "LEDSC_TEENSY_001"))
        assert packet.payload == ("LEDSC_TEENSY_001",)

    def test_non_numeric_status(self):
        """Test a non-numeric status is not a success."""
        packet = ResponsePacket(command="CSB", parameters=("BF",), crc16_in=0, crc16_calc=0)
        assert packet.status_code is None
        assert not packet.succeeded

    @pytest.mark.parametrize("line,code", [
        ("CSE:0]A0D8", ERR_MISSING_STX),
        ("[CSE:0A0D8", ERR_MISSING_ETX),
        ("[CSE:0]", ERR_MISSING_CRC16),
        ("[CSE:0]ZZZZ", ERR_MISSING_CRC16),
        ("[CSE:0]A0D9", ERR_CRC16_MISMATCH),
        ("[CPV]7D02", ERR_MISSING_PARAMS),
    ])
    def test_malformed(self, line, code):
        """Test malformed lines raise with the matching local code."""
        with pytest.raises(ResponseParseError) as exc_info:
            parse_response(line)
        assert exc_info.value.code == code
        assert exc_info.value.category == "protocol"


@pytest.mark.unit
class TestBuildAndDecode:
    """Test the firmware-side helpers."""

    def test_build_response(self):
        """Test responses are framed like the firmware frames them."""
        assert build_response("CSE", 0) == "[CSE:0]A0D8\r"
        assert build_response("CS", -104) == "[CS:-104]599D\r"

    def test_decode_command(self):
        """Test a request frame decodes back into a Command."""
        command = decode_command("[CSB:5C]4AEA\r\n")
        assert command.code is CommandCode.SET_BRIGHTNESS
        assert command.params == ("5C",)

    def test_decode_unknown_command(self):
        """Test unknown tokens are rejected."""
        body = "[XYZ]"
        with pytest.raises(ResponseParseError) as exc_info:
            decode_command(f"{body}{crc16_xmodem(body.encode()):X}")
        assert exc_info.value.code == ERR_CMD_UNKNOWN


@pytest.mark.unit
class TestKnownProtocolVersion:
    """Test firmware version matching."""

    @pytest.mark.parametrize("version,expected", [
        ("LEDSC_TEENSY_001", KnownProtocolVersion.LEDSC_TEENSY_001),
        ("ledsc_teensy_001", KnownProtocolVersion.LEDSC_TEENSY_001),
        ("LEDSC_TEENSY_002", KnownProtocolVersion.LEDSC_TEENSY_NEWER),
        ("BOARD LEDSC_TEENSY_010 rev b", KnownProtocolVersion.LEDSC_TEENSY_NEWER),
        ("SOMETHING_ELSE", KnownProtocolVersion.UNKNOWN),
        ("", KnownProtocolVersion.UNKNOWN),
    ])
    def test_from_version_string(self, version, expected):
        """Test matching of version strings."""
        assert KnownProtocolVersion.from_version_string(version) is expected

    def test_teensy_001_rejects_reboots(self):
        """Test 001 firmware does not support reset or bootloader."""
        version = KnownProtocolVersion.LEDSC_TEENSY_001
        assert not version.supports(CommandCode.FULL_RESET)
        assert not version.supports(CommandCode.ENTER_BOOTLOADER)
        assert version.supports(CommandCode.SET_BRIGHTNESS)

    def test_unknown_supports_everything(self):
        """Test unknown firmware is not second-guessed."""
        for code in CommandCode:
            assert KnownProtocolVersion.UNKNOWN.supports(code)
