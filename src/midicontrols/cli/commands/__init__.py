"""CLI commands for midicontrols."""

from .midi import midi_group
from .tree import tree_group

__all__ = ["midi_group", "tree_group"]
