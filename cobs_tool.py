#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""
COBS packet tool.

Usage:
    python cobs_tool.py encode payload.bin -o packet.bin
    python cobs_tool.py encode --hex 11220033
    python cobs_tool.py decode --hex 0311220233 00
    python cobs_tool.py send --port /dev/ttyACM0 payload.bin
    python cobs_tool.py listen --port /dev/ttyACM0 --count 10
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import serial

from cobs_codec import PacketLink, cobs_encode, split_packets
from cobs_codec.transport import LinkError


def _read_input(args) -> bytes:
    """Read the input bytes from the hex argument, a file or stdin."""
    if args.hex is not None:
        return bytes.fromhex("".join(args.hex))
    if args.file is not None:
        return args.file.read_bytes()
    return sys.stdin.buffer.read()


def _write_output(args, data: bytes):
    """Write bytes to the output file, or as hex to stdout."""
    if args.output is not None:
        args.output.write_bytes(data)
        print(f"Wrote {len(data)} bytes to {args.output}")
    else:
        print(data.hex())


def cmd_encode(args) -> bool:
    """Encode the input as one packet."""
    _write_output(args, cobs_encode(_read_input(args)))
    return True


def cmd_decode(args) -> bool:
    """Decode every packet in the input."""
    data = _read_input(args)
    packets = split_packets(data)

    if not packets:
        print("Error: no complete packet found", file=sys.stderr)
        return False

    if args.output is not None:
        _write_output(args, b"".join(packets))
    else:
        for packet in packets:
            print(packet.hex())
    return True


def cmd_send(link: PacketLink, payload: bytes):
    """Send one packet."""
    print(f"Sending {len(payload)} bytes to {link.port}... ", end="", flush=True)
    link.send_packet(payload)
    print("OK")


def cmd_listen(link: PacketLink, count: int):
    """Print received packets until count is reached."""
    received = 0
    while count == 0 or received < count:
        packet = link.receive_packet()
        received += 1
        print(f"[{received}] {len(packet):4d} bytes: {packet.hex()}")

    if link.dropped_packets:
        print(f"Dropped {link.dropped_packets} corrupted packet(s)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="COBS packet encoder/decoder"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("encode", "Encode input as one COBS packet"),
        ("decode", "Decode COBS packets"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", type=Path, nargs="?",
                         help="Input file (default: stdin)")
        sub.add_argument("--hex", "-x", nargs="+", metavar="HEX",
                         help="Input given as hex digits instead of a file")
        sub.add_argument("--output", "-o", type=Path,
                         help="Output file (default: hex on stdout)")

    send_parser = subparsers.add_parser("send", help="Send a file as one packet")
    send_parser.add_argument("file", type=Path, help="Payload file")

    listen_parser = subparsers.add_parser("listen", help="Print received packets")
    listen_parser.add_argument("--count", "-n", type=int, default=0,
                               help="Stop after this many packets (0=forever)")

    for sub in (send_parser, listen_parser):
        sub.add_argument("--port", "-p", required=True,
                         help="Serial port (e.g., /dev/ttyACM0)")
        sub.add_argument("--baudrate", "-b", type=int, default=115200,
                         help="Baud rate")
        sub.add_argument("--timeout", "-t", type=float, default=1.0,
                         help="Read timeout in seconds")

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    if getattr(args, "file", None) is not None and not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    if args.command == "encode":
        ok = cmd_encode(args)
    elif args.command == "decode":
        ok = cmd_decode(args)
    else:
        try:
            link = PacketLink(args.port, args.baudrate, timeout=args.timeout)
        except serial.SerialException as e:
            print(f"Error opening {args.port}: {e}", file=sys.stderr)
            sys.exit(1)

        try:
            if args.command == "send":
                cmd_send(link, args.file.read_bytes())
            elif args.command == "listen":
                cmd_listen(link, args.count)
            ok = True
        except LinkError as e:
            print(f"Error: {e}", file=sys.stderr)
            ok = False
        finally:
            link.close()

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
