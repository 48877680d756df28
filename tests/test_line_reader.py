"""Tests for newline framing over an unframed transport."""

import pytest

from odrive_ascii.protocol.line_reader import LineReader
from odrive_ascii.utils.exceptions import SerialTimeoutError

from conftest import ScriptedTransport, SilentTransport


def test_line_split_across_reads():
    """Chunks are accumulated until the terminator shows up."""
    transport = ScriptedTransport(["ab", "c\n", "d"])
    reader = LineReader(transport)

    assert reader.read_line() == "abc"
    # Stops reading as soon as the newline arrived
    assert transport.recv_calls == 2


def test_bytes_after_terminator_are_dropped():
    """Trailing bytes in the same chunk are not carried over."""
    transport = ScriptedTransport(["abc\nd", "e\n"])
    reader = LineReader(transport)

    assert reader.read_line() == "abc"
    assert reader.read_line() == "e"


def test_zero_byte_reads_are_retried():
    """Empty reads (transport timeouts) just loop."""
    transport = ScriptedTransport([b"", b"", b"42\n"])
    reader = LineReader(transport)

    assert reader.read_line() == "42"
    assert transport.recv_calls == 3


def test_carriage_return_is_kept():
    """Only the newline is stripped."""
    transport = ScriptedTransport(["1.5 2\r\n"])
    assert LineReader(transport).read_line() == "1.5 2\r"


def test_empty_line():
    transport = ScriptedTransport(["\n"])
    assert LineReader(transport).read_line() == ""


def test_non_ascii_bytes_map_one_to_one():
    transport = ScriptedTransport([b"\xff\x80\n"])
    assert LineReader(transport).read_line() == "\xff\x80"


def test_buffer_size_is_passed_to_transport():
    transport = ScriptedTransport(["ab\n"])
    LineReader(transport, buffer_size=4).read_line()
    assert transport.max_lengths == [4]


def test_timeout_on_silent_transport():
    """With a timeout set, a silent transport raises instead of blocking."""
    transport = SilentTransport()
    reader = LineReader(transport, timeout=0.05)

    with pytest.raises(SerialTimeoutError):
        reader.read_line()
    assert transport.recv_calls >= 1
