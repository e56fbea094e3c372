# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""
Serial packet link.

Sends and receives COBS packets over a serial port, using 0x00 as the
packet delimiter.
"""

import serial

from .cobs import DecodeStatus, decode
from .packets import cobs_encode


class LinkError(Exception):
    """Base exception for serial link errors."""
    pass


class LinkTimeoutError(LinkError):
    """Timeout waiting for a packet."""
    pass


class PacketLink:
    """
    COBS packet link over a serial port.

    Can be used as a context manager:
        with PacketLink("/dev/ttyACM0") as link:
            link.send_packet(b"ping")
            reply = link.receive_packet()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = 115200,
        timeout: float = 1.0,
    ):
        """
        Open the serial port.

        Args:
            port: Serial port path or pyserial URL (e.g., "/dev/ttyACM0",
                "loop://")
            baudrate: Baud rate (default 115200)
            timeout: Read timeout in seconds (default 1.0)
        """
        self._ser = serial.serial_for_url(port, baudrate, timeout=timeout)
        self.dropped_packets = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self):
        """Close the serial connection."""
        if self._ser and self._ser.is_open:
            self._ser.close()

    @property
    def port(self) -> str:
        """Return the serial port name."""
        return self._ser.port

    def _receive(self) -> bytes:
        """Receive bytes until 0x00 delimiter."""
        result = bytearray()
        while True:
            byte = self._ser.read(1)
            if not byte:
                raise LinkTimeoutError("Timeout waiting for packet")
            result.append(byte[0])
            if byte[0] == 0:
                break
        return bytes(result)

    def send_packet(self, payload: bytes) -> None:
        """Encode payload and send it as one packet."""
        self._ser.write(cobs_encode(payload))
        self._ser.flush()

    def receive_packet(self) -> bytes:
        """
        Receive and decode the next valid packet.

        Corrupted packets are dropped and counted in dropped_packets.

        Returns:
            Decoded payload

        Raises:
            LinkTimeoutError: If no complete packet arrives in time
        """
        while True:
            frame = self._receive()
            buf = bytearray(len(frame))
            result = decode(frame, buf)
            if result.status == DecodeStatus.OK:
                return bytes(buf[:result.produced])
            if result.status != DecodeStatus.UNEXPECTED_ZERO:
                raise LinkError(f"Cannot decode packet: {result.status.name}")
            self.dropped_packets += 1
