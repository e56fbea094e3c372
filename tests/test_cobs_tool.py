# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""Tests for the cobs_tool command-line interface."""

import pytest
from unittest.mock import Mock, patch

import serial

import cobs_tool
from cobs_codec.packets import cobs_encode
from cobs_codec.transport import LinkTimeoutError


class TestEncodeCommand:
    """Tests for the encode subcommand."""

    def test_encode_hex(self, capsys):
        """Hex input is encoded to a hex packet."""
        cobs_tool.main(["encode", "--hex", "11220033"])

        assert capsys.readouterr().out.strip() == "031122023300"

    def test_encode_hex_split_arguments(self, capsys):
        """Hex digits may be spread over several arguments."""
        cobs_tool.main(["encode", "--hex", "11", "22"])

        assert capsys.readouterr().out.strip() == "03112200"

    def test_encode_file_to_file(self, tmp_path, capsys):
        """File input is encoded into the output file."""
        source = tmp_path / "payload.bin"
        source.write_bytes(b"\x00" * 3)
        target = tmp_path / "packet.bin"

        cobs_tool.main(["encode", str(source), "-o", str(target)])

        assert target.read_bytes() == b"\x01\x01\x01\x01\x00"
        assert "Wrote 5 bytes" in capsys.readouterr().out

    def test_missing_file_exits(self, tmp_path, capsys):
        """A missing input file is reported."""
        with pytest.raises(SystemExit) as exc_info:
            cobs_tool.main(["encode", str(tmp_path / "nope.bin")])

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().err


class TestDecodeCommand:
    """Tests for the decode subcommand."""

    def test_decode_hex_packets(self, capsys):
        """Each packet is printed on its own line."""
        cobs_tool.main(["decode", "--hex", "0311220233", "00", "00", "0201", "00"])

        assert capsys.readouterr().out.splitlines() == ["11220033", "", "01"]

    def test_decode_file_to_file(self, tmp_path):
        """Decoded packets are concatenated into the output file."""
        source = tmp_path / "stream.bin"
        source.write_bytes(cobs_encode(b"ab") + cobs_encode(b"\x00c"))
        target = tmp_path / "out.bin"

        cobs_tool.main(["decode", str(source), "--output", str(target)])

        assert target.read_bytes() == b"ab\x00c"

    def test_decode_without_packet_fails(self, capsys):
        """Input without a complete packet is an error."""
        with pytest.raises(SystemExit) as exc_info:
            cobs_tool.main(["decode", "--hex", "0211"])

        assert exc_info.value.code == 1
        assert "no complete packet" in capsys.readouterr().err


class TestSerialCommands:
    """Tests for the send and listen subcommands."""

    @patch('cobs_tool.PacketLink')
    def test_send(self, mock_link_class, tmp_path, capsys):
        """send transmits the file as one packet."""
        source = tmp_path / "payload.bin"
        source.write_bytes(b"ping")
        mock_link = Mock()
        mock_link.port = "/dev/ttyACM0"
        mock_link_class.return_value = mock_link

        cobs_tool.main(["send", "--port", "/dev/ttyACM0", str(source)])

        mock_link_class.assert_called_once_with("/dev/ttyACM0", 115200, timeout=1.0)
        mock_link.send_packet.assert_called_once_with(b"ping")
        mock_link.close.assert_called_once()
        assert "OK" in capsys.readouterr().out

    @patch('cobs_tool.PacketLink')
    def test_listen_count(self, mock_link_class, capsys):
        """listen stops after the requested number of packets."""
        mock_link = Mock()
        mock_link.receive_packet.side_effect = [b"\x01\x02", b""]
        mock_link.dropped_packets = 1
        mock_link_class.return_value = mock_link

        cobs_tool.main(["listen", "-p", "/dev/ttyUSB0", "-b", "9600", "-n", "2"])

        out = capsys.readouterr().out
        assert "[1]    2 bytes: 0102" in out
        assert "[2]    0 bytes: " in out
        assert "Dropped 1 corrupted packet(s)" in out
        mock_link_class.assert_called_once_with("/dev/ttyUSB0", 9600, timeout=1.0)

    @patch('cobs_tool.PacketLink')
    def test_listen_timeout_exits(self, mock_link_class, capsys):
        """A link error ends the command with status 1."""
        mock_link = Mock()
        mock_link.receive_packet.side_effect = LinkTimeoutError("Timeout waiting for packet")
        mock_link_class.return_value = mock_link

        with pytest.raises(SystemExit) as exc_info:
            cobs_tool.main(["listen", "-p", "/dev/ttyUSB0"])

        assert exc_info.value.code == 1
        assert "Timeout waiting for packet" in capsys.readouterr().err
        mock_link.close.assert_called_once()

    @patch('cobs_tool.PacketLink')
    def test_open_failure_exits(self, mock_link_class, capsys):
        """A port that cannot be opened is reported."""
        mock_link_class.side_effect = serial.SerialException("no such port")

        with pytest.raises(SystemExit) as exc_info:
            cobs_tool.main(["listen", "-p", "/dev/ttyNONE"])

        assert exc_info.value.code == 1
        assert "Error opening /dev/ttyNONE" in capsys.readouterr().err
