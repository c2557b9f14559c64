"""Shared pieces of the control tree: the node contract, build context, naming."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from midicontrols.midi import MidiTransport
from midicontrols.models import ControlSource

ChangeCallback = Callable[[str, Any, ControlSource], None]


def _ignore_change(path: str, value: Any, source: ControlSource) -> None:
    pass


@dataclass
class BuildContext:
    """What every node needs from the root while it is built."""

    transport: MidiTransport | None = None
    suppress_echo: bool = True
    changed: ChangeCallback = _ignore_change


def uniform_name(prefix: str, name: str) -> str:
    """Camel-case `name` onto `prefix` ("wave" + "speed" -> "waveSpeed")."""
    if not prefix:
        return name
    return prefix + name[:1].upper() + name[1:]


def join_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


@runtime_checkable
class TreeNode(Protocol):
    """Operations every toggle, range, range loop and group supports."""

    name: str
    path: str

    def flatten_to_uniforms(self, sink: dict, prefix: str = "") -> None:
        """Write leaf values into `sink` under camel-cased names."""
        ...

    def snapshot_state(self, sink: dict) -> None:
        """Write live values under `sink[name]`."""
        ...

    def snapshot_config(self, sink: dict) -> None:
        """Write re-loadable declarations under `sink[name]`."""
        ...

    def restore_state(self, source: Mapping) -> None:
        """Apply `source[name]`, skipping anything missing or mis-shaped."""
        ...

    def advance(self, dt: float) -> None:
        """Move auto-running loops forward by `dt` seconds."""
        ...

    def release(self) -> None:
        """Remove widgets and detach hardware bindings."""
        ...
