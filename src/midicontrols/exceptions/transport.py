"""MIDI transport exceptions."""

from typing import Optional

from .base import MidiControlsError


class TransportUnavailableError(MidiControlsError):
    """The MIDI handshake failed or no port exists at the requested index."""

    def __init__(
        self,
        direction: str,
        index: Optional[int] = None,
        original_error: Optional[str] = None,
    ):
        """
        Initialize transport unavailable error.

        Args:
            direction: "input" or "output"
            index: Port index that was requested
            original_error: Message from the MIDI backend, if any
        """
        if index is None:
            user_msg = f"MIDI {direction} is not available"
        else:
            user_msg = f"No MIDI {direction} port at index {index}"

        technical = user_msg
        if original_error:
            technical += f": {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=technical,
            recoverable=True,
            recovery_hint=(
                "Controls keep working from the on-screen widgets.\n"
                "Run 'midicontrols midi list' to see available ports"
            ),
        )
        self.direction = direction
        self.index = index
        self.original_error = original_error
