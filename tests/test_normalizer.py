"""Tests for declaration normalizing."""

import pytest

from midicontrols.controls import DEFAULT_STEP_DIVISIONS, normalize, normalize_entry
from midicontrols.exceptions import ConfigError
from midicontrols.models import RangeDescriptor, RangeLoopDescriptor, ToggleDescriptor


@pytest.mark.unit
class TestShorthand:
    """Test shorthand sequences."""

    def test_single_element_is_toggle(self):
        descriptor = normalize_entry("active", [True])
        assert isinstance(descriptor, ToggleDescriptor)
        assert descriptor.value is True
        assert descriptor.note is None

    def test_three_elements_is_range(self):
        descriptor = normalize_entry("speed", [0, 10, 3])
        assert isinstance(descriptor, RangeDescriptor)
        assert (descriptor.min, descriptor.max, descriptor.value) == (0, 10, 3)
        assert descriptor.loop_enabled is False
        assert descriptor.controller_id is None

    def test_default_step(self):
        """Step defaults to |max - min| / 1280."""
        descriptor = normalize_entry("speed", [0, 10, 3])
        assert descriptor.step == 10 / DEFAULT_STEP_DIVISIONS
        assert DEFAULT_STEP_DIVISIONS == 1280

    def test_default_step_negative_bounds(self):
        descriptor = normalize_entry("offset", [-64, 64, 0])
        assert descriptor.step == 0.1

    def test_leading_settings_on_range(self):
        descriptor = normalize_entry("hue", [{"step": 0.5, "controller": 21, "loop": True}, 0, 360, 90])
        assert descriptor.step == 0.5
        assert descriptor.controller_id == 21
        assert descriptor.loop_enabled is True
        assert descriptor.value == 90

    def test_leading_settings_on_toggle(self):
        descriptor = normalize_entry("mute", [{"note": "C4"}, False])
        assert isinstance(descriptor, ToggleDescriptor)
        assert descriptor.note == "C4"

    def test_unknown_setting_rejected(self):
        with pytest.raises(ConfigError, match="unknown settings"):
            normalize_entry("hue", [{"colour": "red"}, 0, 1, 0])

    @pytest.mark.parametrize("raw", [[], [0, 1], [0, 1, 2, 3]])
    def test_bad_lengths_rejected(self, raw):
        with pytest.raises(ConfigError) as exc_info:
            normalize_entry("speed", raw)
        assert exc_info.value.key == "speed"

    def test_non_numeric_bounds_rejected(self):
        with pytest.raises(ConfigError, match="bounds must be numbers"):
            normalize_entry("speed", [0, "ten", 3])

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ConfigError, match="min"):
            normalize_entry("speed", [10, 0, 3])


@pytest.mark.unit
class TestTypedEntries:
    """Test explicit {"type": ...} mappings."""

    def test_typed_toggle(self):
        descriptor = normalize_entry("mode", {"type": "toggle", "value": True, "note": 36})
        assert isinstance(descriptor, ToggleDescriptor)
        assert descriptor.note == 36

    def test_typed_range(self):
        descriptor = normalize_entry(
            "gain", {"type": "range", "min": 0, "max": 1, "value": 0.5, "step": 0.01, "controller": 7}
        )
        assert isinstance(descriptor, RangeDescriptor)
        assert descriptor.controller_id == 7

    def test_typed_rangeloop(self):
        descriptor = normalize_entry(
            "orbit",
            {"type": "rangeloop", "min": 0, "max": 360, "value": 0, "step": 1, "speed": 30, "auto": True},
        )
        assert isinstance(descriptor, RangeLoopDescriptor)
        assert descriptor.speed == 30
        assert descriptor.auto is True

    def test_unknown_type_rejected(self):
        with pytest.raises(ConfigError):
            normalize_entry("x", {"type": "slider", "value": 1})

    def test_range_without_step_rejected(self):
        with pytest.raises(ConfigError, match="step"):
            normalize_entry("x", {"type": "range", "min": 0, "max": 1, "value": 0})

    def test_unknown_field_rejected(self):
        with pytest.raises(ConfigError):
            normalize_entry("x", {"type": "toggle", "value": True, "colour": "red"})

    def test_bad_note_rejected(self):
        with pytest.raises(ConfigError, match="note"):
            normalize_entry("x", {"type": "toggle", "value": True, "note": "H9"})

    @pytest.mark.parametrize("raw", ["fast", 3, None])
    def test_unsupported_shape_rejected(self, raw):
        with pytest.raises(ConfigError, match="unsupported declaration"):
            normalize_entry("x", raw)


@pytest.mark.unit
class TestNormalizeTree:
    """Test normalizing a whole declaration."""

    def test_keeps_hierarchy_and_closed_flags(self):
        result = normalize({"wave": {"closed": True, "speed": [0, 10, 3], "active": [True]}})
        assert result["wave"]["closed"] is True
        assert result["wave"]["active"] == {"type": "toggle", "value": True}
        assert result["wave"]["speed"]["type"] == "range"
        assert result["wave"]["speed"]["loop"] is False

    def test_error_names_full_path(self):
        with pytest.raises(ConfigError) as exc_info:
            normalize({"wave": {"speed": [0, 10]}})
        assert exc_info.value.key == "wave.speed"

    def test_closed_must_be_bool(self):
        with pytest.raises(ConfigError, match="reserved"):
            normalize({"closed": [0, 1, 0]})

    def test_empty_name_rejected(self):
        with pytest.raises(ConfigError, match="non-empty"):
            normalize({"": [True]})

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigError, match="mapping"):
            normalize([[True]])
