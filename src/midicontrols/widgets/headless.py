"""In-memory widget toolkit.

Implements the widget contract without drawing anything. Used by the CLI to
host trees and by tests to simulate human edits with `HeadlessInput.edit()`.

Like most GUI toolkits, programmatic `set_value()` also fires change
callbacks (`notify_programmatic=True`), which makes loop-back bugs visible.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class HeadlessInput:
    """An input widget editing `target[key]`."""

    def __init__(
        self,
        parent: "HeadlessContainer",
        target: dict,
        key: str,
        min: float | None = None,
        max: float | None = None,
        step: float | None = None,
        notify_programmatic: bool = True,
    ):
        self.parent = parent
        self.target = target
        self.key = key
        self.min = min
        self.max = max
        self.step = step
        self.notify_programmatic = notify_programmatic
        self.removed = False
        self._callbacks: list[Callable[[Any], None]] = []

    @property
    def is_slider(self) -> bool:
        return self.min is not None and self.max is not None and self.step is not None

    def on_change(self, callback: Callable[[Any], None]) -> None:
        self._callbacks.append(callback)

    def get_value(self) -> Any:
        return self.target[self.key]

    def set_value(self, value: Any) -> None:
        self.target[self.key] = value
        if self.notify_programmatic:
            self._fire()

    def edit(self, value: Any) -> Any:
        """
        Simulate a human edit: clamp sliders, coerce checkboxes, fire callbacks.

        Returns:
            The value stored after clamping
        """
        if self.removed:
            raise RuntimeError(f"Input '{self.key}' has been removed")

        if self.is_slider:
            value = max(self.min, min(self.max, value))
        elif isinstance(self.target[self.key], bool):
            value = bool(value)

        self.target[self.key] = value
        self._fire()
        return value

    def _fire(self) -> None:
        value = self.target[self.key]
        for callback in list(self._callbacks):
            callback(value)

    def remove(self) -> None:
        self.removed = True
        self._callbacks.clear()
        self.parent._inputs.pop(self.key, None)

    def __repr__(self) -> str:
        return f"HeadlessInput({self.key!r}={self.target.get(self.key)!r})"


class HeadlessContainer:
    """A folder holding inputs and sub-folders by name."""

    def __init__(
        self,
        name: str = "",
        parent: "HeadlessContainer | None" = None,
        notify_programmatic: bool = True,
    ):
        self.name = name
        self.parent = parent
        self.closed = False
        self.notify_programmatic = notify_programmatic
        self.removed = False
        self._folders: dict[str, HeadlessContainer] = {}
        self._inputs: dict[str, HeadlessInput] = {}

    @property
    def folders(self) -> dict[str, "HeadlessContainer"]:
        return dict(self._folders)

    @property
    def inputs(self) -> dict[str, HeadlessInput]:
        return dict(self._inputs)

    def add_folder(self, name: str) -> "HeadlessContainer":
        if name in self._folders:
            raise ValueError(f"Folder '{name}' already exists in '{self.name}'")
        folder = HeadlessContainer(name, parent=self, notify_programmatic=self.notify_programmatic)
        self._folders[name] = folder
        return folder

    def add_input(
        self,
        target: dict,
        key: str,
        min: float | None = None,
        max: float | None = None,
        step: float | None = None,
    ) -> HeadlessInput:
        if key in self._inputs:
            raise ValueError(f"Input '{key}' already exists in '{self.name}'")
        widget = HeadlessInput(
            self, target, key, min, max, step, notify_programmatic=self.notify_programmatic
        )
        self._inputs[key] = widget
        return widget

    def find(self, path: str) -> "HeadlessInput | HeadlessContainer":
        """
        Look up an input or folder by dotted path (e.g. "wave.speed").

        Raises:
            KeyError: If nothing exists at the path
        """
        node: HeadlessContainer = self
        *folders, last = path.split(".")
        for name in folders:
            node = node._folders[name]
        if last in node._inputs:
            return node._inputs[last]
        return node._folders[last]

    def remove(self) -> None:
        for widget in list(self._inputs.values()):
            widget.remove()
        for folder in list(self._folders.values()):
            folder.remove()
        self.removed = True
        if self.parent is not None:
            self.parent._folders.pop(self.name, None)

    def __repr__(self) -> str:
        return f"HeadlessContainer({self.name!r}, folders={list(self._folders)}, inputs={list(self._inputs)})"
