"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import mido
import pytest

from midicontrols.midi import MidiInputEndpoint, MidiOutputEndpoint, MidiTransport
from midicontrols.widgets import HeadlessContainer


class FakeInputPort:
    """Stands in for a mido input port; messages queued with feed() are read by iter_pending()."""

    def __init__(self, name: str = "Fake MIDI In"):
        self.name = name
        self.closed = False
        self.pending: list[mido.Message] = []

    def feed(self, *messages: mido.Message) -> None:
        self.pending.extend(messages)

    def iter_pending(self):
        while self.pending:
            yield self.pending.pop(0)

    def close(self) -> None:
        self.closed = True


class FakeOutputPort:
    """Stands in for a mido output port; records every message sent."""

    def __init__(self, name: str = "Fake MIDI Out"):
        self.name = name
        self.closed = False
        self.sent: list[mido.Message] = []

    def send(self, message: mido.Message) -> None:
        self.sent.append(message)

    def close(self) -> None:
        self.closed = True

    def of_type(self, msg_type: str) -> list[mido.Message]:
        return [msg for msg in self.sent if msg.type == msg_type]


class MidiMessages:
    """Builders for the channel messages the tests feed to bindings."""

    @staticmethod
    def note_on(note: int, velocity: int = 100, channel: int = 0) -> mido.Message:
        return mido.Message('note_on', note=note, velocity=velocity, channel=channel)

    @staticmethod
    def note_off(note: int, channel: int = 0) -> mido.Message:
        return mido.Message('note_off', note=note, velocity=0, channel=channel)

    @staticmethod
    def control_change(control: int, value: int, channel: int = 0) -> mido.Message:
        return mido.Message('control_change', control=control, value=value, channel=channel)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def input_port():
    return FakeInputPort()


@pytest.fixture
def output_port():
    return FakeOutputPort()


@pytest.fixture
def pending_transport():
    """Transport whose handshakes have not settled yet."""
    return MidiTransport()


@pytest.fixture
def transport(input_port, output_port):
    """Transport with both handshakes resolved to fake ports."""
    transport = MidiTransport()
    transport.input.resolve(MidiInputEndpoint(input_port))
    transport.output.resolve(MidiOutputEndpoint(output_port))
    return transport


@pytest.fixture
def failed_transport():
    """Transport whose handshakes were both rejected."""
    from midicontrols.exceptions import TransportUnavailableError

    transport = MidiTransport()
    transport.input.reject(TransportUnavailableError("input", 1))
    transport.output.reject(TransportUnavailableError("output", 1))
    return transport


@pytest.fixture
def container():
    """Top-level headless widget container."""
    return HeadlessContainer()


@pytest.fixture
def wave_config():
    """The canonical two-control declaration."""
    return {"wave": {"speed": [0, 10, 3], "active": [True]}}


@pytest.fixture
def midi():
    """Message builders: midi.note_on(60), midi.control_change(7, 10), ..."""
    return MidiMessages()


@pytest.fixture
def deliver(transport):
    """Dispatch messages straight to the transport's input listeners."""

    def dispatch(*messages: mido.Message) -> None:
        for msg in messages:
            transport.input.value.dispatch(msg)

    return dispatch


@pytest.fixture
def mock_mido():
    """Patch the mido backend with two named ports per direction."""
    with patch("midicontrols.midi.transport.mido") as mido_mock:
        mido_mock.get_input_names.return_value = ["Keyboard In", "Pads In"]
        mido_mock.get_output_names.return_value = ["Keyboard Out", "Pads Out"]
        mido_mock.open_input.side_effect = lambda name: FakeInputPort(name)
        mido_mock.open_output.side_effect = lambda name: FakeOutputPort(name)
        yield mido_mock
