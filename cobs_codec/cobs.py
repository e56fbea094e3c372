# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""
COBS (Consistent Overhead Byte Stuffing) encoder/decoder.

COBS is a framing algorithm that eliminates 0x00 bytes from data,
allowing 0x00 to be used as a packet delimiter.

Both operations work buffer-to-buffer: the caller supplies the
destination buffer (sized with max_encoded_length/max_decoded_length)
and gets a result object back instead of an exception. Nothing is
ever written outside the destination buffer, whatever the input.

Wire format:
    packet      := run* 0x00
    run         := offset data{offset - 1}
    offset      := 1..255

An offset below 255 means one zero byte was elided after the run. An
offset of 255 is a full run and nothing was elided. The elided zero of
the last run before the terminator is implied by the terminator.

When a packet would end in an empty run opened right after a full run
(or at the very start), that run is left out and the terminator takes
its place. The empty input therefore encodes to the single byte 0x00
and 254 non-zero bytes encode to 256 bytes instead of 257.
"""

from dataclasses import dataclass
from enum import IntEnum

MARKER = 0x00
MAX_OFFSET = 0xFF
MAX_RUN = MAX_OFFSET - 1


class EncodeStatus(IntEnum):
    """Outcome of an encode operation."""
    OK = 0
    WRITE_OVERFLOW = 1

    def __str__(self) -> str:
        return self.name


class DecodeStatus(IntEnum):
    """Outcome of a decode operation."""
    OK = 0
    WRITE_OVERFLOW = 1
    READ_OVERFLOW = 2
    UNEXPECTED_ZERO = 3

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class EncodeResult:
    """
    Result of encode().

    produced is the number of bytes written to the destination when the
    status is OK, and 0 otherwise.
    """
    status: EncodeStatus
    produced: int = 0

    @property
    def is_ok(self) -> bool:
        return self.status == EncodeStatus.OK


@dataclass(frozen=True)
class DecodeResult:
    """
    Result of decode().

    consumed is the number of source bytes read when the status is OK or
    UNEXPECTED_ZERO; a new decode can be started at src[consumed:]. It is
    0 for the overflow statuses.

    produced is the number of bytes written to the destination when the
    status is OK, and 0 otherwise.
    """
    status: DecodeStatus
    consumed: int = 0
    produced: int = 0

    @property
    def is_ok(self) -> bool:
        return self.status == DecodeStatus.OK


def max_encoded_length(decoded_length: int) -> int:
    """
    Smallest destination size that can hold the encoding of any input
    of decoded_length bytes.

    The worst case is input without zeros: one offset byte per started
    run of 254 bytes plus the terminator.
    """
    if decoded_length < 0:
        raise ValueError("Decoded length cannot be negative")
    return decoded_length + (decoded_length + MAX_RUN - 1) // MAX_RUN + 1


def max_decoded_length(encoded_length: int) -> int:
    """
    Largest decoded length an encoded packet of encoded_length bytes can
    produce.

    Every non-empty packet carries at least a first offset and the
    terminator. Shorter buffers can only hold the empty packet.
    """
    if encoded_length < 0:
        raise ValueError("Encoded length cannot be negative")
    return max(encoded_length - 2, 0)


def _writable(dst) -> memoryview:
    view = memoryview(dst)
    if view.readonly:
        raise TypeError("Destination buffer is read-only")
    return view.cast("B") if view.format != "B" else view


def encode(src, dst) -> EncodeResult:
    """
    Encode src into dst, terminator included.

    Args:
        src: Bytes-like object to encode
        dst: Writable buffer receiving the packet

    Returns:
        EncodeResult with OK and the packet length, or WRITE_OVERFLOW if
        dst is too small
    """
    out = _writable(dst)
    capacity = len(out)

    # code_idx is the slot of the offset being accumulated, copy_idx the
    # next data position. code_idx < copy_idx at all times.
    code_idx = 0
    copy_idx = 1
    code = 1
    after_zero = False

    for byte in memoryview(src).cast("B"):
        if byte != MARKER:
            if copy_idx >= capacity:
                return EncodeResult(EncodeStatus.WRITE_OVERFLOW)
            out[copy_idx] = byte
            copy_idx += 1
            code += 1
            if code != MAX_OFFSET:
                continue
            after_zero = False
        else:
            after_zero = True

        if code_idx >= capacity:
            return EncodeResult(EncodeStatus.WRITE_OVERFLOW)
        out[code_idx] = code
        code_idx = copy_idx
        copy_idx += 1
        code = 1

    if code == 1 and not after_zero:
        # Empty trailing run: the terminator goes into its slot.
        end = code_idx
    else:
        if code_idx >= capacity:
            return EncodeResult(EncodeStatus.WRITE_OVERFLOW)
        out[code_idx] = code
        end = copy_idx

    if end >= capacity:
        return EncodeResult(EncodeStatus.WRITE_OVERFLOW)
    out[end] = MARKER

    return EncodeResult(EncodeStatus.OK, end + 1)


def decode(src, dst) -> DecodeResult:
    """
    Decode the first packet of src into dst.

    Bytes after the terminator are left untouched, so several packets
    can be decoded from one buffer by restarting at src[consumed:].

    Args:
        src: Bytes-like object starting with a COBS packet
        dst: Writable buffer receiving the decoded bytes

    Returns:
        DecodeResult. On UNEXPECTED_ZERO, consumed points just past the
        offending zero so the caller can resynchronize there.
    """
    data = memoryview(src).cast("B")
    out = _writable(dst)
    src_len = len(data)
    capacity = len(out)

    if src_len == 0:
        return DecodeResult(DecodeStatus.READ_OVERFLOW)

    offset = data[0]
    read_idx = 1
    write_idx = 0

    if offset == MARKER:
        # Empty packet
        return DecodeResult(DecodeStatus.OK, read_idx, write_idx)

    while True:
        run_end = read_idx + offset - 1
        while read_idx < run_end:
            if read_idx >= src_len:
                return DecodeResult(DecodeStatus.READ_OVERFLOW)
            byte = data[read_idx]
            read_idx += 1
            if byte == MARKER:
                return DecodeResult(DecodeStatus.UNEXPECTED_ZERO, read_idx)
            if write_idx >= capacity:
                return DecodeResult(DecodeStatus.WRITE_OVERFLOW)
            out[write_idx] = byte
            write_idx += 1

        if read_idx >= src_len:
            return DecodeResult(DecodeStatus.READ_OVERFLOW)
        next_offset = data[read_idx]
        read_idx += 1

        if next_offset == MARKER:
            break

        if offset != MAX_OFFSET:
            if write_idx >= capacity:
                return DecodeResult(DecodeStatus.WRITE_OVERFLOW)
            out[write_idx] = MARKER
            write_idx += 1

        offset = next_offset

    return DecodeResult(DecodeStatus.OK, read_idx, write_idx)
