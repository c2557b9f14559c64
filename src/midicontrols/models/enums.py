"""Enumerations for control trees."""

from enum import Enum


class ControlKind(str, Enum):
    """Kinds of leaf declarations."""

    TOGGLE = "toggle"  # Boolean, optionally bound to a pad/key note
    RANGE = "range"  # Bounded number, optionally bound to a knob
    RANGE_LOOP = "rangeloop"  # Looping value with speed and auto-run flag


class ControlSource(str, Enum):
    """Where an applied value change came from."""

    WIDGET = "widget"  # Human edit in the on-screen widget
    HARDWARE = "hardware"  # Pad press or knob turn
    RESTORE = "restore"  # restore_state() from a saved snapshot
    AUTO = "auto"  # advance() on an auto-running loop
