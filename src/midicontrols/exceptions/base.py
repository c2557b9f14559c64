"""Root of the midicontrols error hierarchy.

Every error carries two messages. The short one names what went wrong in
terms of the user's controls or MIDI devices and is what the CLI prints;
the technical one carries the offending value, port index or backend error
and goes to the log. `recoverable` marks errors where the tree or transport
stays usable (a missing MIDI port leaves widget-only controls working), as
opposed to a declaration the builder had to reject outright.
"""


class MidiControlsError(Exception):
    """
    Base class for errors raised by midicontrols.

    `str(error)` is the short message; `get_full_message()` appends the
    recovery hint when one is known.
    """

    def __init__(
        self,
        user_message: str,
        technical_message: str | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.user_message!r}, recoverable={self.recoverable})"

    def get_full_message(self) -> str:
        """Short message followed by a "Suggestion:" paragraph when a hint exists."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
