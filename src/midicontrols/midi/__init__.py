"""MIDI transport and hardware bindings."""

from .bindings import HardwareBinding, RotaryBinding, ToggleBinding
from .endpoints import MidiInputEndpoint, MidiOutputEndpoint, Subscription, classify_message
from .handshake import Handshake, HandshakeState
from .notes import note_number
from .transport import MidiTransport

__all__ = [
    "Handshake",
    "HandshakeState",
    "HardwareBinding",
    "MidiInputEndpoint",
    "MidiOutputEndpoint",
    "MidiTransport",
    "RotaryBinding",
    "Subscription",
    "ToggleBinding",
    "classify_message",
    "note_number",
]
