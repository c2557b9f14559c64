"""midicontrols: parameter trees kept in sync across widgets and MIDI hardware."""

__version__ = "0.1.0"

from .controls import Controls
from .midi import MidiTransport
from .models import AppConfig
from .widgets import HeadlessContainer

__all__ = [
    "AppConfig",
    "Controls",
    "HeadlessContainer",
    "MidiTransport",
]
