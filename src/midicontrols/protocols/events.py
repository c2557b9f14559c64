"""Domain events for observer pattern.

This module defines events that can occur within a control tree:
- MIDI events: Messages arriving on the input endpoint
- Binding events: Normalized notifications a hardware binding emits
"""

from enum import Enum


class MidiEvent(Enum):
    """Incoming MIDI messages a listener can subscribe to."""

    NOTE_ON = "note_on"                  # Note on with velocity > 0
    NOTE_RELEASED = "note_released"      # Note off, or note on with velocity 0
    CONTROL_CHANGE = "control_change"    # Control change (knob/fader)


class BindingEvent(Enum):
    """Notifications from a hardware binding to the control that owns it."""

    PRESS = "press"                # Toggle pad released: flip request, no payload
    CHANGE = "change"              # Knob moved by a signed number of ticks
    UNAVAILABLE = "unavailable"    # Transport handshake failed, binding is inert
