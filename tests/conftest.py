# SPDX-License-Identifier: MIT
# Copyright (c) 2026 ADNT Sarl <info@adnt.io>

"""Pytest configuration for integration tests."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--device",
        action="store",
        default=None,
        help="Serial port or pyserial URL to run the link tests on "
             "(default: loop://). The device must echo every byte back.",
    )


@pytest.fixture(scope="session")
def device_port(request):
    """Get the device port from command line, loopback by default."""
    return request.config.getoption("--device") or "loop://"


@pytest.fixture
def link(device_port):
    """
    Create a packet link on the test port.

    This is function-scoped so each test starts with an empty input
    queue and a fresh dropped_packets counter.
    """
    from cobs_codec.transport import PacketLink

    link = PacketLink(device_port, timeout=0.2)
    yield link
    link.close()
