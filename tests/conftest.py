"""Shared fixtures: a scripted transport standing in for a serial port."""

import pytest

from odrive_ascii.protocol.interface import Transport
from odrive_ascii.protocol.logger import ProtocolLogger
from odrive_ascii.client.odrive_client import ODriveClient
from odrive_ascii.config.models import SimulatorConfig
from odrive_ascii.simulator.mock_serial import MockODriveSerial


class ScriptedTransport(Transport):
    """Returns pre-scripted chunks from recv() and records every send()."""

    def __init__(self, chunks=(), stale=b""):
        self.chunks = [c.encode("latin-1") if isinstance(c, str) else c for c in chunks]
        self.stale = stale
        self.sent = []
        self.recv_calls = 0
        self.drain_calls = 0
        self.max_lengths = []

    def send(self, data: bytes) -> None:
        self.sent.append(data)

    def recv(self, max_length: int) -> bytes:
        self.recv_calls += 1
        self.max_lengths.append(max_length)
        if not self.chunks:
            raise AssertionError("recv() called with no scripted data left")
        return self.chunks.pop(0)[:max_length]

    def drain(self, max_length: int) -> bytes:
        self.drain_calls += 1
        data, self.stale = self.stale[:max_length], self.stale[max_length:]
        return data


class SilentTransport(Transport):
    """A transport that never answers."""

    def __init__(self):
        self.recv_calls = 0

    def send(self, data: bytes) -> None:
        pass

    def recv(self, max_length: int) -> bytes:
        self.recv_calls += 1
        return b""


@pytest.fixture
def scripted():
    """Factory for a client over a ScriptedTransport."""
    def make(*chunks, stale=b""):
        transport = ScriptedTransport(chunks, stale=stale)
        client = ODriveClient(transport, protocol_logger=ProtocolLogger())
        return client, transport
    return make


@pytest.fixture
def simulator():
    return MockODriveSerial(SimulatorConfig(chunk_size=5))


@pytest.fixture
def sim_client(simulator):
    return ODriveClient(simulator, protocol_logger=ProtocolLogger())
