"""Command line interface for midicontrols."""
