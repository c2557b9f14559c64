"""Groups and the recursive tree builder."""

import logging
from collections.abc import Mapping

from midicontrols.exceptions import ConfigError
from midicontrols.models import ControlDescriptor, ControlKind
from midicontrols.widgets import WidgetContainer

from .leaf import RangeControl, ToggleControl
from .loop import RangeLoopControl
from .node import BuildContext, TreeNode, join_path, uniform_name
from .normalizer import CLOSED_KEY, check_key, is_closed_flag, is_group_entry, normalize_entry

logger = logging.getLogger(__name__)


def build_control(
    name: str,
    descriptor: ControlDescriptor,
    container: WidgetContainer,
    context: BuildContext,
    path: str,
) -> TreeNode:
    """Construct the leaf for a descriptor, dispatching on its kind."""
    match descriptor.kind:
        case ControlKind.TOGGLE:
            return ToggleControl(name, descriptor, container, context, path)
        case ControlKind.RANGE:
            return RangeControl(name, descriptor, container, context, path)
        case ControlKind.RANGE_LOOP:
            return RangeLoopControl(name, descriptor, container, context, path)
    raise ConfigError(path, f"unsupported control kind {descriptor.kind!r}")


def build_children(
    config: Mapping,
    container: WidgetContainer,
    context: BuildContext,
    parent: str = "",
) -> list[TreeNode]:
    """
    Build one node per declaration entry, in declaration order.

    If any entry is rejected, the nodes already built are released before
    the error propagates, so the container is left as it was.

    Raises:
        ConfigError: On the first malformed entry
    """
    children: list[TreeNode] = []
    try:
        for key, raw in config.items():
            path = join_path(parent, str(key))
            check_key(key, path, raw)
            if is_closed_flag(key, raw):
                continue
            if is_group_entry(raw):
                children.append(ControlGroup(key, raw, container, context, path))
            else:
                children.append(build_control(key, normalize_entry(path, raw), container, context, path))
    except Exception:
        for child in children:
            child.release()
        raise
    return children


class ControlGroup:
    """A named folder of controls and sub-groups."""

    def __init__(
        self,
        name: str,
        config: Mapping,
        container: WidgetContainer,
        context: BuildContext,
        path: str,
    ):
        self.name = name
        self.path = path
        self.folder = container.add_folder(name)
        self.folder.closed = bool(config.get(CLOSED_KEY, False))
        try:
            self.children = build_children(config, self.folder, context, path)
        except Exception:
            self.folder.remove()
            raise

    def flatten_to_uniforms(self, sink: dict, prefix: str = "") -> None:
        prefix = uniform_name(prefix, self.name)
        for child in self.children:
            child.flatten_to_uniforms(sink, prefix)

    def snapshot_state(self, sink: dict) -> None:
        state: dict = {}
        sink[self.name] = state
        for child in self.children:
            child.snapshot_state(state)

    def snapshot_config(self, sink: dict) -> None:
        config: dict = {}
        sink[self.name] = config
        if self.folder.closed:
            config[CLOSED_KEY] = True
        for child in self.children:
            child.snapshot_config(config)

    def restore_state(self, source: Mapping) -> None:
        state = source.get(self.name)
        if not isinstance(state, Mapping):
            logger.debug(f"No saved state for group '{self.path}', keeping current values")
            return
        for child in self.children:
            child.restore_state(state)

    def advance(self, dt: float) -> None:
        for child in self.children:
            child.advance(dt)

    def release(self) -> None:
        for child in self.children:
            child.release()
        self.children = []
        self.folder.remove()

    def find(self, parts: list[str]) -> TreeNode | None:
        """Look up a descendant by path segments."""
        return find_node(self.children, parts)

    def __repr__(self) -> str:
        return f"ControlGroup({self.path!r}, children={len(self.children)})"


def find_node(children: list[TreeNode], parts: list[str]) -> TreeNode | None:
    if not parts:
        return None
    head, *rest = parts
    for child in children:
        if child.name != head:
            continue
        if not rest:
            return child
        if isinstance(child, ControlGroup):
            return child.find(rest)
        return None
    return None
