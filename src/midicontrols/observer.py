"""Generic observer pattern manager.

Handles registration, unregistration and notification of observers for
bindings and control trees. Control trees are single-threaded: callbacks run
to completion on the thread that delivered the widget edit or polled the MIDI
input, so no locking is done here.
"""

import logging
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=object)


class ObserverManager(Generic[T]):
    """
    Generic observer list with error-isolated notification.

    Type Parameters:
        T: The observer protocol type (e.g., BindingObserver, ControlObserver)

    Example:
        ```python
        class MyBinding:
            def __init__(self):
                self._observers = ObserverManager[BindingObserver]("binding")

            def register_observer(self, observer: BindingObserver) -> None:
                self._observers.register(observer)

            def _pressed(self):
                self._observers.notify('on_press', self)
        ```
    """

    def __init__(self, observer_type_name: str = "observer"):
        """
        Initialize the observer manager.

        Args:
            observer_type_name: Name of the observer type for logging (e.g., "binding", "control")
        """
        self._observers: list[T] = []
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register an observer (idempotent - won't add duplicates)."""
        if observer not in self._observers:
            self._observers.append(observer)
            logger.debug(f"Registered {self._observer_type_name} observer: {observer}")
        else:
            logger.debug(f"{self._observer_type_name} observer already registered: {observer}")

    def unregister(self, observer: T) -> None:
        """Unregister an observer."""
        if observer in self._observers:
            self._observers.remove(observer)
            logger.debug(f"Unregistered {self._observer_type_name} observer: {observer}")
        else:
            logger.warning(
                f"Attempted to unregister unknown {self._observer_type_name} observer: {observer}"
            )

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Notify all observers by calling their callback method.

        The observer list is copied first, so observers may register or
        unregister during notification.

        Args:
            callback_name: Name of the callback method to call (e.g., 'on_press')
            *args: Positional arguments to pass to the callback
            **kwargs: Keyword arguments to pass to the callback

        Error Handling:
            Exceptions in observer callbacks are logged but don't affect other observers.
        """
        for observer in list(self._observers):
            try:
                callback = getattr(observer, callback_name)
            except AttributeError:
                logger.error(
                    f"{self._observer_type_name} observer {observer} has no method '{callback_name}'"
                )
                continue

            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error notifying {self._observer_type_name} observer {observer} via {callback_name}: {e}",
                    exc_info=True,
                )

    def clear(self) -> None:
        """Remove all registered observers."""
        count = len(self._observers)
        self._observers.clear()
        if count > 0:
            logger.debug(f"Cleared {count} {self._observer_type_name} observer(s)")

    def __contains__(self, observer: T) -> bool:
        return observer in self._observers

    def __len__(self) -> int:
        return len(self._observers)

    def __bool__(self) -> bool:
        return len(self._observers) > 0
