"""Widget toolkit contract consumed by control trees.

Any toolkit can host a control tree by adapting its folders and inputs to
these protocols. `midicontrols.widgets.headless` is a reference
implementation without rendering.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WidgetHandle(Protocol):
    """One input widget bound to `target[key]`."""

    def on_change(self, callback: Callable[[Any], None]) -> None:
        """Register the callback fired with the new value after an edit."""
        ...

    def set_value(self, value: Any) -> None:
        """
        Show a value set by the program.

        Toolkits may or may not fire change callbacks for programmatic
        updates; controls suppress their own re-entrant callbacks either way.
        """
        ...

    def get_value(self) -> Any:
        ...

    def remove(self) -> None:
        """Destroy the widget and drop its callbacks."""
        ...


@runtime_checkable
class WidgetContainer(Protocol):
    """A folder of inputs and sub-folders with a collapsed flag."""

    closed: bool

    def add_folder(self, name: str) -> "WidgetContainer":
        ...

    def add_input(
        self,
        target: dict,
        key: str,
        min: float | None = None,
        max: float | None = None,
        step: float | None = None,
    ) -> WidgetHandle:
        """
        Add an input editing `target[key]`.

        A slider when min, max and step are given; otherwise the toolkit
        picks a widget from the value type (a checkbox for bools).
        """
        ...

    def remove(self) -> None:
        """Destroy the folder and everything in it."""
        ...
