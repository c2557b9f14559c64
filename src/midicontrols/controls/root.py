"""Root of a control tree."""

import logging
from collections.abc import Mapping
from typing import Any

from midicontrols.exceptions import ConfigError
from midicontrols.midi import MidiTransport
from midicontrols.models import ControlSource
from midicontrols.observer import ObserverManager
from midicontrols.protocols import ControlObserver
from midicontrols.widgets import WidgetContainer

from .group import build_children, find_node
from .node import BuildContext, TreeNode
from .normalizer import CLOSED_KEY

logger = logging.getLogger(__name__)


class Controls:
    """
    Builds a control tree from a declaration and exposes the tree-wide operations.

    The caller always supplies the top-level widget container, and
    optionally a MIDI transport shared by every hardware binding. Without a
    transport, `note` and `controller` settings are kept in the descriptors
    but nothing is bound.

    Usage Example:
        ```python
        container = HeadlessContainer()
        transport = MidiTransport.from_config(AppConfig.load_or_default())
        controls = Controls(
            {"wave": {"speed": [0, 10, 3], "active": [True]}},
            container,
            transport=transport,
        )
        transport.enable()

        controls.flatten_to_uniforms()   # {"waveSpeed": 3.0, "waveActive": True}
        state = controls.snapshot_state()
        controls.restore_state(state)
        ```

    Rebuilding a tree means calling release() on the old one first, so its
    bindings stop listening on the shared transport.
    """

    def __init__(
        self,
        config: Mapping | None,
        container: WidgetContainer,
        transport: MidiTransport | None = None,
        suppress_echo: bool = True,
    ):
        """
        Build the tree.

        Args:
            config: Declaration mapping (None or empty builds an empty tree)
            container: Top-level widget container
            transport: Shared MIDI transport (optional)
            suppress_echo: Ignore device echoes of toggle note-offs

        Raises:
            ConfigError: If any entry is malformed; nothing is left in the container
        """
        self.container = container
        self.transport = transport
        self.children: list[TreeNode] = []
        self._observers = ObserverManager[ControlObserver](observer_type_name="control")
        self._context = BuildContext(
            transport=transport,
            suppress_echo=suppress_echo,
            changed=self._notify_changed,
        )

        if not config:
            return
        if not isinstance(config, Mapping):
            raise ConfigError("<root>", "a declaration must be a mapping of names", config)

        container.closed = bool(config.get(CLOSED_KEY, False))
        self.children = build_children(config, container, self._context)
        logger.info(f"Built control tree with {len(self.children)} top-level node(s)")

    def register_observer(self, observer: ControlObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: ControlObserver) -> None:
        self._observers.unregister(observer)

    def _notify_changed(self, path: str, value: Any, source: ControlSource) -> None:
        logger.debug(f"{path} = {value!r} ({source.value})")
        self._observers.notify("on_control_changed", path, value, source)

    def flatten_to_uniforms(self, sink: dict | None = None, prefix: str = "") -> dict:
        """
        Collect every leaf value under a camel-cased name.

        Args:
            sink: Mapping to fill (a new dict if None)
            prefix: Leading name segment ("u" gives "uWaveSpeed")

        Returns:
            The filled mapping
        """
        if sink is None:
            sink = {}
        for child in self.children:
            child.flatten_to_uniforms(sink, prefix)
        return sink

    def snapshot_state(self, sink: dict | None = None) -> dict:
        """Live values in the group hierarchy, plus the root `closed` flag."""
        if sink is None:
            sink = {}
        sink[CLOSED_KEY] = self.container.closed
        for child in self.children:
            child.snapshot_state(sink)
        return sink

    def snapshot_config(self, sink: dict | None = None) -> dict:
        """Full declarations with current values, loadable as a new tree."""
        if sink is None:
            sink = {}
        if self.container.closed:
            sink[CLOSED_KEY] = True
        for child in self.children:
            child.snapshot_config(sink)
        return sink

    def restore_state(self, source: Mapping) -> None:
        """
        Apply a state snapshot to widgets and hardware.

        Entries missing from `source`, or shaped differently from the live
        tree, are skipped and keep their current values.
        """
        if not isinstance(source, Mapping):
            logger.warning(f"Ignoring state snapshot of type {type(source).__name__}")
            return

        if isinstance(source.get(CLOSED_KEY), bool):
            self.container.closed = source[CLOSED_KEY]
        for child in self.children:
            child.restore_state(source)

    def advance(self, dt: float) -> None:
        """Move auto-running range loops forward by `dt` seconds."""
        for child in self.children:
            child.advance(dt)

    def find(self, path: str) -> TreeNode | None:
        """Look up a node by dotted path (e.g. "wave.speed")."""
        return find_node(self.children, path.split("."))

    def release(self) -> None:
        """Remove every widget and detach every hardware binding."""
        for child in self.children:
            child.release()
        self.children = []
        self._observers.clear()
        logger.debug("Control tree released")

    def __repr__(self) -> str:
        return f"Controls(children={[child.name for child in self.children]})"
