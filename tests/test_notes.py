"""Tests for note identifier parsing."""

import pytest

from midicontrols.midi import note_number


@pytest.mark.unit
class TestNoteNumber:

    @pytest.mark.parametrize(
        "note, expected",
        [
            (0, 0),
            (127, 127),
            ("C4", 60),
            ("c4", 60),
            ("A4", 69),
            ("F#3", 54),
            ("Bb3", 58),
            ("C-1", 0),
            ("G9", 127),
        ],
    )
    def test_valid(self, note, expected):
        assert note_number(note) == expected

    @pytest.mark.parametrize("note", [-1, 128, "H4", "C", "C#", "G#9", "", True, 60.0, None])
    def test_invalid(self, note):
        with pytest.raises(ValueError):
            note_number(note)
