"""Leaf controls: one parameter with a widget and an optional hardware binding.

Every applied change goes through `_apply()`, which updates the value, shows
it in the widget with re-entrant widget callbacks suppressed, reflects it to
hardware and reports it to the tree's observers. Human widget edits update
the value and hardware only; the widget already shows them.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from midicontrols.midi import HardwareBinding, RotaryBinding, ToggleBinding
from midicontrols.models import ControlSource, RangeDescriptor, ToggleDescriptor
from midicontrols.widgets import WidgetContainer

from .node import BuildContext, uniform_name

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def wrap(value: float, lo: float, hi: float) -> float:
    """
    Wrap an overshoot back into [lo, hi].

    104 in [0, 100] becomes 4 and -3 becomes 97; overshoots larger than the
    span reduce modulo the span.
    """
    span = hi - lo
    if value > hi:
        return lo + math.fmod(value - hi, span)
    if value < lo:
        return hi - math.fmod(lo - value, span)
    return value


class Control:
    """Value, widget, optional binding and the tree operations of a leaf."""

    def __init__(
        self,
        name: str,
        descriptor: ToggleDescriptor | RangeDescriptor,
        container: WidgetContainer,
        context: BuildContext,
        path: str,
    ):
        self.name = name
        self.path = path
        self.descriptor = descriptor
        self.binding: HardwareBinding | None = None
        self._context = context
        self._syncing = False

        self.value = self._coerce(descriptor.value)
        self._model = {name: self.value}
        self.widget = container.add_input(self._model, name, *self._widget_range())
        self.widget.on_change(self._on_widget_change)

    def _coerce(self, value: Any) -> Any:
        return value

    def _widget_range(self) -> tuple:
        return ()

    def _on_widget_change(self, value: Any) -> None:
        if self._syncing:
            return
        coerced = self._coerce(value)
        if coerced != value:
            # clamped or wrapped; the widget must show what the control holds
            self._apply(coerced, ControlSource.WIDGET)
            return
        self.value = coerced
        if self.binding is not None:
            self.binding.set_value(self.value)
        self._context.changed(self.path, self.value, ControlSource.WIDGET)

    def _apply(self, value: Any, source: ControlSource) -> None:
        self.value = value
        self._syncing = True
        try:
            self.widget.set_value(value)
        finally:
            self._syncing = False
        if self.binding is not None:
            self.binding.set_value(value)
        self._context.changed(self.path, value, source)

    def on_binding_unavailable(self, binding: HardwareBinding, error: Exception) -> None:
        logger.info(f"Control '{self.path}' continues without hardware: {error}")

    def flatten_to_uniforms(self, sink: dict, prefix: str = "") -> None:
        sink[uniform_name(prefix, self.name)] = self.value

    def snapshot_state(self, sink: dict) -> None:
        sink[self.name] = self.value

    def snapshot_config(self, sink: dict) -> None:
        self.descriptor = self.descriptor.model_copy(update={"value": self.value})
        sink[self.name] = self.descriptor.to_config()

    def restore_state(self, source: Mapping) -> None:
        if self.name not in source:
            logger.debug(f"No saved value for '{self.path}', keeping {self.value!r}")
            return
        try:
            value = self._coerce(source[self.name])
        except (TypeError, ValueError):
            logger.debug(f"Skipping saved value for '{self.path}': {source[self.name]!r}")
            return
        self._apply(value, ControlSource.RESTORE)

    def advance(self, dt: float) -> None:
        pass

    def release(self) -> None:
        if self.binding is not None:
            self.binding.release()
            self.binding = None
        self.widget.remove()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r}={self.value!r})"


class ToggleControl(Control):
    """
    Boolean parameter.

    A pad press flips the value and pushes it to the widget and back to the
    pad so its light follows.
    """

    def __init__(self, name, descriptor: ToggleDescriptor, container, context, path):
        super().__init__(name, descriptor, container, context, path)

        if descriptor.note is None:
            return
        if context.transport is None:
            logger.debug(f"No MIDI transport, '{path}' is widget-only")
            return

        self.binding = ToggleBinding(
            context.transport,
            descriptor.note,
            self.value,
            suppress_echo=context.suppress_echo,
            observer=self,
        )

    def _coerce(self, value: Any) -> bool:
        if not isinstance(value, (bool, int)):
            raise TypeError(f"Expected a bool, got {value!r}")
        return bool(value)

    def on_press(self, binding: HardwareBinding) -> None:
        self._apply(not self.value, ControlSource.HARDWARE)


class RangeControl(Control):
    """
    Bounded number.

    Knob ticks move the value by `step` each; the result is clamped to
    [min, max], or wrapped around when `loop` is set.
    """

    def __init__(self, name, descriptor: RangeDescriptor, container, context, path):
        super().__init__(name, descriptor, container, context, path)

        if descriptor.controller_id is None:
            return
        if context.transport is None:
            logger.debug(f"No MIDI transport, '{path}' is widget-only")
            return

        self.binding = RotaryBinding(
            context.transport,
            descriptor.controller_id,
            self.value,
            descriptor.min,
            descriptor.max,
            observer=self,
        )

    def _coerce(self, value: Any) -> float:
        if isinstance(value, bool):
            raise TypeError(f"Expected a number, got {value!r}")
        return self._bound(float(value))

    def _bound(self, value: float) -> float:
        d = self.descriptor
        if d.loop_enabled:
            return wrap(value, d.min, d.max)
        return clamp(value, d.min, d.max)

    def _widget_range(self) -> tuple:
        d = self.descriptor
        return (d.min, d.max, d.step)

    def on_change(self, binding: HardwareBinding, delta: int) -> None:
        self._apply(self._bound(self.value + self.descriptor.step * delta), ControlSource.HARDWARE)
