"""Unit tests for descriptor and settings models."""

import json

import pytest
from pydantic import ValidationError

from midicontrols.exceptions import ConfigFileInvalidError, ConfigValidationError
from midicontrols.models import (
    AppConfig,
    ControlKind,
    DescriptorAdapter,
    RangeDescriptor,
    RangeLoopDescriptor,
    ToggleDescriptor,
)


class TestToggleDescriptor:
    """Test ToggleDescriptor model."""

    @pytest.mark.unit
    def test_defaults(self):
        descriptor = ToggleDescriptor()
        assert descriptor.value is False
        assert descriptor.kind == ControlKind.TOGGLE

    @pytest.mark.unit
    def test_note_name_accepted(self):
        assert ToggleDescriptor(note="F#3").note == "F#3"

    @pytest.mark.unit
    def test_note_out_of_range(self):
        with pytest.raises(ValidationError):
            ToggleDescriptor(note=128)

    @pytest.mark.unit
    def test_to_config_omits_unset_note(self):
        assert ToggleDescriptor(value=True).to_config() == {"type": "toggle", "value": True}


class TestRangeDescriptor:
    """Test RangeDescriptor model."""

    @pytest.mark.unit
    def test_span(self):
        descriptor = RangeDescriptor(min=-1, max=3, value=0, step=0.1)
        assert descriptor.span == 4

    @pytest.mark.unit
    def test_min_must_be_below_max(self):
        with pytest.raises(ValidationError):
            RangeDescriptor(min=1, max=1, value=1, step=0.1)

    @pytest.mark.unit
    def test_step_must_be_positive(self):
        with pytest.raises(ValidationError):
            RangeDescriptor(min=0, max=1, value=0, step=0)

    @pytest.mark.unit
    def test_controller_range(self):
        with pytest.raises(ValidationError):
            RangeDescriptor(min=0, max=1, value=0, step=0.1, controller=200)

    @pytest.mark.unit
    def test_aliases_in_config(self):
        """Serialized names are the declaration keys, not the attribute names."""
        descriptor = RangeDescriptor(min=0, max=1, value=0, step=0.1, controller=7, loop=True)
        config = descriptor.to_config()
        assert config["controller"] == 7
        assert config["loop"] is True
        assert "controller_id" not in config
        assert "loop_enabled" not in config

    @pytest.mark.unit
    def test_config_reloads_to_equal_descriptor(self):
        descriptor = RangeDescriptor(min=0, max=1, value=0.25, step=0.1, controller=7)
        assert DescriptorAdapter.validate_python(descriptor.to_config()) == descriptor


class TestRangeLoopDescriptor:
    """Test RangeLoopDescriptor model."""

    @pytest.mark.unit
    def test_speed_within_span(self):
        RangeLoopDescriptor(min=0, max=10, value=0, step=1, speed=-10)
        with pytest.raises(ValidationError):
            RangeLoopDescriptor(min=0, max=10, value=0, step=1, speed=11)

    @pytest.mark.unit
    def test_kind(self):
        descriptor = RangeLoopDescriptor(min=0, max=10, value=0, step=1)
        assert descriptor.kind == ControlKind.RANGE_LOOP
        assert descriptor.auto is False
        assert descriptor.speed == 0


class TestAppConfig:
    """Test AppConfig model."""

    @pytest.mark.unit
    def test_defaults(self):
        config = AppConfig()
        assert config.input_index == 1
        assert config.output_index == 1
        assert config.channel == 0
        assert config.note_velocity == 127
        assert config.suppress_hardware_echo is True

    @pytest.mark.unit
    def test_missing_file_gives_defaults(self, temp_dir):
        assert AppConfig.load_or_default(temp_dir / "missing.json") == AppConfig()

    @pytest.mark.unit
    def test_save_and_load(self, temp_dir):
        path = temp_dir / "nested" / "config.json"
        config = AppConfig(input_index=0, output_index=2, channel=9, suppress_hardware_echo=False)
        config.save(path)

        assert path.exists()
        assert AppConfig.load_or_default(path) == config

    @pytest.mark.unit
    def test_invalid_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text('{"channel": 1,}')

        with pytest.raises(ConfigFileInvalidError) as exc_info:
            AppConfig.load_or_default(path)
        assert exc_info.value.file_path == str(path)

    @pytest.mark.unit
    def test_invalid_value(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"channel": 16}))

        with pytest.raises(ConfigValidationError) as exc_info:
            AppConfig.load_or_default(path)
        assert exc_info.value.field == "channel"
        assert "0-15" in exc_info.value.recovery_hint
