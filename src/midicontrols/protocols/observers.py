"""Observer protocol definitions for control trees.

- Binding observers: React to pad presses and knob turns
- Control observers: React to any applied value change
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from midicontrols.midi.bindings import HardwareBinding
    from midicontrols.models import ControlSource


@runtime_checkable
class BindingObserver(Protocol):
    """
    Observer that receives normalized hardware notifications.

    Controls implement this to learn about pad presses and knob turns
    from the binding they own.
    """

    def on_press(self, binding: "HardwareBinding") -> None:
        """Handle a toggle pad release (flip request)."""
        ...

    def on_change(self, binding: "HardwareBinding", delta: int) -> None:
        """
        Handle a knob movement.

        Args:
            binding: The rotary binding that moved
            delta: Signed number of ticks, wraparound-corrected
        """
        ...

    def on_binding_unavailable(self, binding: "HardwareBinding", error: Exception) -> None:
        """
        Handle a failed transport handshake.

        Called at most once per binding. The binding is inert afterwards;
        widgets keep working.
        """
        ...


@runtime_checkable
class ControlObserver(Protocol):
    """
    Observer that receives every applied value change in a tree.

    Useful for pushing uniforms to a renderer as soon as they change
    instead of flattening the tree every frame.
    """

    def on_control_changed(self, path: str, value: Any, source: "ControlSource") -> None:
        """
        Handle a value change.

        Args:
            path: Dotted path of the control (e.g. "wave.speed", "orbit.speed")
            value: The new value
            source: Which channel the change came from

        Error Handling:
            Exceptions raised by observers are caught and logged. They do not
            propagate to the widget or MIDI callback that caused the change.
        """
        ...
