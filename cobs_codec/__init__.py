# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""
COBS packet codec - Python library.

This package encodes and decodes Consistent Overhead Byte Stuffing
packets, so that 0x00 can be used as a packet delimiter on a byte
stream such as a serial link.

Example usage:
    from cobs_codec import encode, decode, max_encoded_length, max_decoded_length

    payload = b"\\x11\\x22\\x00\\x33"
    buf = bytearray(max_encoded_length(len(payload)))
    result = encode(payload, buf)
    packet = bytes(buf[:result.produced])

    out = bytearray(max_decoded_length(len(packet)))
    result = decode(packet, out)
    if result.is_ok:
        print(out[:result.produced])

    # Or, without managing buffers
    from cobs_codec import cobs_encode, cobs_decode

    assert cobs_decode(cobs_encode(payload)) == payload
"""

from .cobs import (
    MARKER,
    DecodeResult,
    DecodeStatus,
    EncodeResult,
    EncodeStatus,
    decode,
    encode,
    max_decoded_length,
    max_encoded_length,
)
from .packets import (
    CobsError,
    ReadOverflowError,
    UnexpectedZeroError,
    WriteOverflowError,
    cobs_decode,
    cobs_encode,
    split_packets,
)
from .transport import (
    LinkError,
    LinkTimeoutError,
    PacketLink,
)

__version__ = "0.1.0"

__all__ = [
    # Codec
    "MARKER",
    "EncodeStatus",
    "DecodeStatus",
    "EncodeResult",
    "DecodeResult",
    "encode",
    "decode",
    # Capacity
    "max_encoded_length",
    "max_decoded_length",
    # Packets
    "cobs_encode",
    "cobs_decode",
    "split_packets",
    "CobsError",
    "WriteOverflowError",
    "ReadOverflowError",
    "UnexpectedZeroError",
    # Serial link
    "PacketLink",
    "LinkError",
    "LinkTimeoutError",
]
