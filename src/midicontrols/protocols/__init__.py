"""Protocol definitions for observer patterns and interfaces.

- Events: MIDI input and hardware binding events
- Observers: Protocols for components that react to these events
"""

from .events import BindingEvent, MidiEvent
from .observers import BindingObserver, ControlObserver

__all__ = [
    # Events
    "BindingEvent",
    # Observers
    "BindingObserver",
    "ControlObserver",
    "MidiEvent",
]
