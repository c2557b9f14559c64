"""Note identifier parsing."""

import re

# Scientific pitch notation: C4 is middle C (MIDI note 60)
NOTE_OFFSETS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTALS = {"": 0, "#": 1, "b": -1}

_NOTE_PATTERN = re.compile(r"^([A-Ga-g])(#|b)?(-?\d+)$")


def note_number(note: int | str) -> int:
    """
    Resolve a note identifier to a MIDI note number.

    Args:
        note: MIDI note number (0-127) or a name such as "C4", "F#3", "Bb-1"

    Returns:
        MIDI note number (0-127)

    Raises:
        ValueError: If the identifier is malformed or out of range
    """
    if isinstance(note, bool):
        raise ValueError(f"Invalid note identifier: {note!r}")

    if isinstance(note, int):
        number = note
    elif isinstance(note, str):
        match = _NOTE_PATTERN.match(note.strip())
        if not match:
            raise ValueError(f"Invalid note name: {note!r}")
        letter, accidental, octave = match.groups()
        number = (int(octave) + 1) * 12 + NOTE_OFFSETS[letter.upper()] + ACCIDENTALS[accidental or ""]
    else:
        raise ValueError(f"Invalid note identifier: {note!r}")

    if not 0 <= number <= 127:
        raise ValueError(f"Note {note!r} is outside the MIDI range 0-127")
    return number
