"""End-to-end tests for control trees: building, uniforms, snapshots, release."""

from unittest.mock import Mock

import pytest

from midicontrols.controls import ControlGroup, Controls, RangeControl, ToggleControl
from midicontrols.exceptions import ConfigError
from midicontrols.models import ControlSource
from midicontrols.protocols import MidiEvent
from midicontrols.widgets import HeadlessContainer


@pytest.mark.integration
class TestWaveScenario:
    """The two-control scenario from declaration to snapshots."""

    def test_builds_folder_and_inputs(self, wave_config, container):
        controls = Controls(wave_config, container)

        assert isinstance(controls.find("wave"), ControlGroup)
        assert isinstance(controls.find("wave.speed"), RangeControl)
        assert isinstance(controls.find("wave.active"), ToggleControl)
        assert set(container.find("wave").inputs) == {"speed", "active"}

    def test_uniforms(self, wave_config, container):
        controls = Controls(wave_config, container)
        assert controls.flatten_to_uniforms() == {"waveSpeed": 3, "waveActive": True}

    def test_uniforms_with_prefix(self, wave_config, container):
        controls = Controls(wave_config, container)
        assert controls.flatten_to_uniforms(prefix="u") == {"uWaveSpeed": 3, "uWaveActive": True}

    def test_uniforms_into_existing_sink(self, wave_config, container):
        controls = Controls(wave_config, container)
        sink = {"time": 1.5}
        assert controls.flatten_to_uniforms(sink) is sink
        assert sink == {"time": 1.5, "waveSpeed": 3, "waveActive": True}

    def test_edit_then_state(self, wave_config, container):
        controls = Controls(wave_config, container)
        container.find("wave.speed").edit(7)

        assert controls.flatten_to_uniforms()["waveSpeed"] == 7
        assert controls.snapshot_state() == {"closed": False, "wave": {"speed": 7, "active": True}}

    def test_state_round_trip(self, wave_config, container):
        controls = Controls(wave_config, container)
        container.find("wave.speed").edit(7)
        container.find("wave.active").edit(False)
        state = controls.snapshot_state()

        fresh = Controls(wave_config, HeadlessContainer())
        fresh.restore_state(state)

        assert fresh.snapshot_state() == state
        assert fresh.flatten_to_uniforms() == {"waveSpeed": 7, "waveActive": False}

    def test_config_round_trip(self, wave_config, container):
        controls = Controls(wave_config, container)
        container.find("wave.speed").edit(7)
        config = controls.snapshot_config()

        assert config["wave"]["speed"]["value"] == 7
        assert config["wave"]["active"] == {"type": "toggle", "value": True}

        rebuilt = Controls(config, HeadlessContainer())
        assert rebuilt.snapshot_config() == config
        assert rebuilt.flatten_to_uniforms() == controls.flatten_to_uniforms()


@pytest.mark.integration
class TestNesting:

    def test_deep_names(self, container):
        controls = Controls({"scene": {"light": {"intensity": [0, 1, 0.5]}}}, container)

        assert controls.flatten_to_uniforms() == {"sceneLightIntensity": 0.5}
        assert controls.snapshot_state() == {"closed": False, "scene": {"light": {"intensity": 0.5}}}
        assert container.find("scene.light.intensity").get_value() == 0.5

    def test_declaration_order_kept(self, container):
        controls = Controls({"b": [True], "a": [0, 1, 0], "c": {"d": [False]}}, container)
        assert list(controls.flatten_to_uniforms()) == ["b", "a", "cD"]

    def test_empty_tree(self, container):
        for config in ({}, None):
            controls = Controls(config, container)
            assert controls.flatten_to_uniforms() == {}
            assert controls.snapshot_config() == {}
            assert controls.snapshot_state() == {"closed": False}

    def test_find_missing(self, wave_config, container):
        controls = Controls(wave_config, container)
        assert controls.find("wave.depth") is None
        assert controls.find("wave.speed.x") is None
        assert controls.find("ripple") is None


@pytest.mark.integration
class TestClosedFlag:

    def test_closed_folders(self, container):
        controls = Controls({"closed": True, "wave": {"closed": True, "speed": [0, 10, 3]}}, container)

        assert container.closed is True
        assert container.find("wave").closed is True
        assert "closed" not in controls.flatten_to_uniforms()

    def test_state_has_root_closed_only(self, container):
        controls = Controls({"wave": {"closed": True, "speed": [0, 10, 3]}}, container)
        assert controls.snapshot_state() == {"closed": False, "wave": {"speed": 3}}

    def test_config_records_collapsed_folders(self, container):
        controls = Controls({"wave": {"speed": [0, 10, 3]}, "hue": {"h": [0, 1, 0]}}, container)
        container.closed = True
        container.find("wave").closed = True

        config = controls.snapshot_config()

        assert config["closed"] is True
        assert config["wave"]["closed"] is True
        assert "closed" not in config["hue"]

        rebuilt_container = HeadlessContainer()
        Controls(config, rebuilt_container)
        assert rebuilt_container.closed is True
        assert rebuilt_container.find("wave").closed is True
        assert rebuilt_container.find("hue").closed is False

    def test_restore_closed(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state({"closed": True})
        assert container.closed is True

        controls.restore_state({"wave": {"speed": 1}})
        assert container.closed is True


@pytest.mark.integration
class TestRestoreMismatch:
    """Restoring tolerates snapshots that do not match the tree."""

    def test_missing_entries_keep_values(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state({"wave": {"speed": 5}})

        assert controls.flatten_to_uniforms() == {"waveSpeed": 5, "waveActive": True}

    def test_wrong_shapes_skipped(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state({"wave": {"speed": "fast", "active": "yes"}})
        controls.restore_state({"wave": 5})

        assert controls.flatten_to_uniforms() == {"waveSpeed": 3, "waveActive": True}

    def test_extra_entries_ignored(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state({"wave": {"speed": 4, "depth": 9}, "ripple": {"x": 1}})

        assert controls.flatten_to_uniforms() == {"waveSpeed": 4, "waveActive": True}

    def test_out_of_range_clamped(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state({"wave": {"speed": 50}})

        assert controls.find("wave.speed").value == 10
        assert container.find("wave.speed").get_value() == 10

    def test_not_a_mapping(self, wave_config, container):
        controls = Controls(wave_config, container)
        controls.restore_state(["nope"])
        assert controls.flatten_to_uniforms() == {"waveSpeed": 3, "waveActive": True}

    def test_restore_pushes_to_hardware(self, container, transport, output_port):
        controls = Controls({"speed": [{"controller": 7}, 0, 10, 3], "mute": [{"note": 60}, False]}, container, transport)
        observer = Mock()
        controls.register_observer(observer)

        controls.restore_state({"speed": 10, "mute": True})

        assert output_port.of_type("control_change")[-1].value == 127
        assert output_port.of_type("note_on")[-1].note == 60
        observer.on_control_changed.assert_any_call("speed", 10, ControlSource.RESTORE)
        observer.on_control_changed.assert_any_call("mute", True, ControlSource.RESTORE)


@pytest.mark.integration
class TestBuildErrors:

    def test_error_leaves_container_empty(self, container):
        with pytest.raises(ConfigError):
            Controls({"ok": [True], "group": {"fine": [0, 1, 0], "bad": [1, 2]}}, container)

        assert container.inputs == {}
        assert container.folders == {}

    def test_error_releases_bindings(self, container, transport):
        with pytest.raises(ConfigError):
            Controls({"mute": [{"note": 60}, False], "bad": "x"}, container, transport)

        assert transport.input.value.listener_count() == 0

    def test_not_a_mapping(self, container):
        with pytest.raises(ConfigError):
            Controls([["speed", [0, 1, 0]]], container)


@pytest.mark.integration
class TestObserversAndRelease:

    def test_observer_sees_paths(self, wave_config, container):
        controls = Controls(wave_config, container)
        observer = Mock()
        controls.register_observer(observer)

        container.find("wave.speed").edit(7)

        observer.on_control_changed.assert_called_once_with("wave.speed", 7, ControlSource.WIDGET)

    def test_unregister(self, wave_config, container):
        controls = Controls(wave_config, container)
        observer = Mock()
        controls.register_observer(observer)
        controls.unregister_observer(observer)

        container.find("wave.speed").edit(7)

        observer.on_control_changed.assert_not_called()

    def test_failing_observer_does_not_break_edits(self, wave_config, container):
        controls = Controls(wave_config, container)
        observer = Mock()
        observer.on_control_changed.side_effect = RuntimeError("renderer gone")
        controls.register_observer(observer)

        container.find("wave.speed").edit(7)

        assert controls.find("wave.speed").value == 7

    def test_release_detaches_everything(self, container, transport):
        controls = Controls(
            {"wave": {"speed": [{"controller": 7}, 0, 10, 3], "active": [{"note": 60}, True]}},
            container,
            transport,
        )
        endpoint = transport.input.value
        assert endpoint.listener_count() == 3

        controls.release()

        assert endpoint.listener_count() == 0
        assert container.folders == {}
        assert controls.flatten_to_uniforms() == {}

    def test_rebuild_on_shared_transport(self, container, transport, midi, deliver):
        declaration = {"speed": [{"controller": 7}, 0, 10, 3]}
        first = Controls(declaration, container, transport)
        first.release()
        second = Controls(declaration, container, transport)

        deliver(midi.control_change(7, 127))

        assert transport.input.value.listener_count(MidiEvent.CONTROL_CHANGE) == 1
        assert second.find("speed").value > 3

    def test_build_before_enable(self, container, pending_transport, input_port, output_port, midi):
        """Bindings created before the handshake settles start working once it does."""
        from midicontrols.midi import MidiInputEndpoint, MidiOutputEndpoint

        controls = Controls({"mute": [{"note": 60}, True]}, container, pending_transport)
        assert output_port.sent == []

        pending_transport.input.resolve(MidiInputEndpoint(input_port))
        pending_transport.output.resolve(MidiOutputEndpoint(output_port))
        assert output_port.sent[0].type == "note_on"

        input_port.feed(midi.note_on(60), midi.note_off(60))
        assert pending_transport.poll() == 2
        assert controls.find("mute").value is False
