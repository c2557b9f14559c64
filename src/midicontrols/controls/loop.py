"""Range loop: a wrapping value that can run on its own.

One knob and one pad drive three parameters shown in a folder:

- `value`: wraps around [min, max]
- `speed`: units per second, within +/- (max - min)
- `auto`: when on, advance() moves `value` by `speed` and the knob edits
  `speed` instead of `value`

The pad flips `auto`.
"""

import logging
from collections.abc import Mapping
from typing import Any

from midicontrols.midi import HardwareBinding, RotaryBinding, ToggleBinding
from midicontrols.models import ControlSource, RangeLoopDescriptor
from midicontrols.widgets import WidgetContainer

from .leaf import clamp, wrap
from .node import BuildContext, join_path, uniform_name

logger = logging.getLogger(__name__)

PARTS = ("value", "speed", "auto")


class RangeLoopControl:
    """Composite control for a `rangeloop` declaration."""

    def __init__(
        self,
        name: str,
        descriptor: RangeLoopDescriptor,
        container: WidgetContainer,
        context: BuildContext,
        path: str,
    ):
        self.name = name
        self.path = path
        self.descriptor = descriptor
        self._context = context
        self._syncing = False

        self.value = wrap(descriptor.value, descriptor.min, descriptor.max)
        self.speed = descriptor.speed
        self.auto = descriptor.auto
        self._model = {"value": self.value, "speed": self.speed, "auto": self.auto}

        span = descriptor.span
        self.folder = container.add_folder(name)
        self.widgets = {
            "value": self.folder.add_input(
                self._model, "value", descriptor.min, descriptor.max, descriptor.step
            ),
            "speed": self.folder.add_input(self._model, "speed", -span, span, descriptor.step),
            "auto": self.folder.add_input(self._model, "auto"),
        }
        self.widgets["value"].on_change(self._on_value_edit)
        self.widgets["speed"].on_change(self._on_speed_edit)
        self.widgets["auto"].on_change(self._on_auto_edit)

        self.rotary: RotaryBinding | None = None
        self.toggle: ToggleBinding | None = None
        if context.transport is None:
            if descriptor.controller_id is not None or descriptor.note is not None:
                logger.debug(f"No MIDI transport, '{path}' is widget-only")
            return

        if descriptor.controller_id is not None:
            lo, hi = self._knob_range()
            self.rotary = RotaryBinding(
                context.transport,
                descriptor.controller_id,
                self.speed if self.auto else self.value,
                lo,
                hi,
                observer=self,
            )
        if descriptor.note is not None:
            self.toggle = ToggleBinding(
                context.transport,
                descriptor.note,
                self.auto,
                suppress_echo=context.suppress_echo,
                observer=self,
            )

    def _knob_range(self) -> tuple[float, float]:
        d = self.descriptor
        if self.auto:
            return (-d.span, d.span)
        return (d.min, d.max)

    def _sync_knob(self) -> None:
        if self.rotary is None:
            return
        self.rotary.rescale(*self._knob_range())
        self.rotary.set_value(self.speed if self.auto else self.value)

    def _show(self, part: str, value: Any) -> None:
        self._model[part] = value
        self._syncing = True
        try:
            self.widgets[part].set_value(value)
        finally:
            self._syncing = False

    def _set(self, part: str, value: Any, source: ControlSource, show: bool = True) -> None:
        setattr(self, part, value)
        if show:
            self._show(part, value)
        if part == "auto":
            if self.toggle is not None:
                self.toggle.set_value(value)
            self._sync_knob()
        elif part == ("speed" if self.auto else "value"):
            self._sync_knob()
        self._context.changed(join_path(self.path, part), value, source)

    def _on_value_edit(self, value: Any) -> None:
        if not self._syncing:
            d = self.descriptor
            wrapped = wrap(float(value), d.min, d.max)
            self._set("value", wrapped, ControlSource.WIDGET, show=wrapped != value)

    def _on_speed_edit(self, value: Any) -> None:
        if not self._syncing:
            span = self.descriptor.span
            clamped = clamp(float(value), -span, span)
            self._set("speed", clamped, ControlSource.WIDGET, show=clamped != value)

    def _on_auto_edit(self, value: Any) -> None:
        if not self._syncing:
            self._set("auto", bool(value), ControlSource.WIDGET, show=False)

    def on_change(self, binding: HardwareBinding, delta: int) -> None:
        d = self.descriptor
        if self.auto:
            speed = clamp(self.speed + d.step * delta, -d.span, d.span)
            self._set("speed", speed, ControlSource.HARDWARE)
        else:
            self._set("value", wrap(self.value + d.step * delta, d.min, d.max), ControlSource.HARDWARE)

    def on_press(self, binding: HardwareBinding) -> None:
        self._set("auto", not self.auto, ControlSource.HARDWARE)

    def on_binding_unavailable(self, binding: HardwareBinding, error: Exception) -> None:
        logger.info(f"Control '{self.path}' continues without hardware: {error}")

    def advance(self, dt: float) -> None:
        if not self.auto or not self.speed:
            return
        d = self.descriptor
        self._set("value", wrap(self.value + self.speed * dt, d.min, d.max), ControlSource.AUTO)

    def flatten_to_uniforms(self, sink: dict, prefix: str = "") -> None:
        base = uniform_name(prefix, self.name)
        for part in PARTS:
            sink[uniform_name(base, part)] = getattr(self, part)

    def snapshot_state(self, sink: dict) -> None:
        sink[self.name] = {part: getattr(self, part) for part in PARTS}

    def snapshot_config(self, sink: dict) -> None:
        self.descriptor = self.descriptor.model_copy(
            update={part: getattr(self, part) for part in PARTS}
        )
        sink[self.name] = self.descriptor.to_config()

    def restore_state(self, source: Mapping) -> None:
        entry = source.get(self.name)
        if not isinstance(entry, Mapping):
            logger.debug(f"No saved state for '{self.path}', keeping current values")
            return

        d = self.descriptor
        # auto first, so the knob is scaled for the part it edits
        if isinstance(entry.get("auto"), bool):
            self._set("auto", entry["auto"], ControlSource.RESTORE)
        if isinstance(entry.get("speed"), (int, float)) and not isinstance(entry["speed"], bool):
            self._set("speed", clamp(float(entry["speed"]), -d.span, d.span), ControlSource.RESTORE)
        if isinstance(entry.get("value"), (int, float)) and not isinstance(entry["value"], bool):
            self._set("value", wrap(float(entry["value"]), d.min, d.max), ControlSource.RESTORE)

    def release(self) -> None:
        for binding in (self.rotary, self.toggle):
            if binding is not None:
                binding.release()
        self.rotary = None
        self.toggle = None
        self.folder.remove()

    def __repr__(self) -> str:
        return f"RangeLoopControl({self.path!r}, value={self.value!r}, speed={self.speed!r}, auto={self.auto!r})"
