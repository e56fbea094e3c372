# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""
Allocating helpers on top of the buffer-to-buffer codec.

These return bytes and raise on failure, for callers that do not want
to size buffers or inspect status codes themselves.
"""

from typing import List, Union

from .cobs import (
    DecodeResult,
    DecodeStatus,
    EncodeResult,
    decode,
    encode,
    max_encoded_length,
)


class CobsError(ValueError):
    """Base exception for COBS packet errors."""

    def __init__(self, message: str, result: Union[EncodeResult, DecodeResult]):
        super().__init__(message)
        self.result = result


class WriteOverflowError(CobsError):
    """Destination buffer too small."""
    pass


class ReadOverflowError(CobsError):
    """Source ended before the packet terminator."""
    pass


class UnexpectedZeroError(CobsError):
    """Zero byte inside a run of encoded data."""
    pass


_DECODE_ERRORS = {
    DecodeStatus.WRITE_OVERFLOW: WriteOverflowError,
    DecodeStatus.READ_OVERFLOW: ReadOverflowError,
    DecodeStatus.UNEXPECTED_ZERO: UnexpectedZeroError,
}


def cobs_encode(data: bytes) -> bytes:
    """
    Encode data using COBS.

    Args:
        data: Raw bytes to encode

    Returns:
        COBS packet, trailing 0x00 delimiter included
    """
    buf = bytearray(max_encoded_length(len(data)))
    result = encode(data, buf)
    if not result.is_ok:
        raise WriteOverflowError(f"COBS encode: {result.status.name}", result)
    return bytes(buf[:result.produced])


def cobs_decode(data: bytes) -> bytes:
    """
    Decode the first COBS packet in data.

    Args:
        data: Bytes starting with a COBS packet (delimiter included)

    Returns:
        Decoded raw bytes

    Raises:
        ReadOverflowError: If the delimiter is missing
        UnexpectedZeroError: If the packet is malformed
    """
    # A decode never writes more bytes than it reads.
    buf = bytearray(len(data))
    result = decode(data, buf)
    if not result.is_ok:
        error = _DECODE_ERRORS[result.status]
        raise error(f"COBS decode: {result.status.name}", result)
    return bytes(buf[:result.produced])


def split_packets(data: bytes) -> List[bytes]:
    """
    Decode every complete packet in data.

    Malformed packets are skipped by resuming right after the offending
    zero. A trailing incomplete packet is ignored.

    Args:
        data: Concatenated COBS packets

    Returns:
        List of decoded packets, in order
    """
    view = memoryview(data)
    buf = bytearray(len(view))
    packets = []
    pos = 0

    while pos < len(view):
        result = decode(view[pos:], buf)
        if result.status == DecodeStatus.OK:
            packets.append(bytes(buf[:result.produced]))
        elif result.status != DecodeStatus.UNEXPECTED_ZERO:
            break
        pos += result.consumed

    return packets
