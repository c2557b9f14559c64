"""Explicit lifecycle for the asynchronous MIDI enable handshake.

A Handshake starts PENDING and moves exactly once to READY (carrying the
endpoint) or FAILED (carrying the error). Work registered with `then()` while
pending is queued and drained in registration order on READY; on FAILED the
queue is dropped and each registration's failure callback runs once.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)


class HandshakeState(str, Enum):
    """Handshake lifecycle states."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


T = TypeVar("T")


class Handshake(Generic[T]):
    """
    One-shot PENDING -> READY | FAILED transition with queued continuations.

    Example:
        ```python
        output = Handshake[MidiOutputEndpoint]("output")
        output.then(lambda port: port.send_note_on(60))  # queued
        output.resolve(endpoint)                          # note sent now
        output.then(lambda port: port.send_note_off(60))  # runs immediately
        ```
    """

    def __init__(self, name: str):
        """
        Initialize a pending handshake.

        Args:
            name: Name used in log messages (e.g. "input", "output")
        """
        self.name = name
        self._state = HandshakeState.PENDING
        self._value: T | None = None
        self._error: Exception | None = None
        self._queued: list[tuple[Callable[[T], None], Callable[[Exception], None] | None]] = []

    @property
    def state(self) -> HandshakeState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is HandshakeState.PENDING

    @property
    def is_ready(self) -> bool:
        return self._state is HandshakeState.READY

    @property
    def is_failed(self) -> bool:
        return self._state is HandshakeState.FAILED

    @property
    def value(self) -> T | None:
        """Resolved endpoint, or None unless READY."""
        return self._value

    @property
    def error(self) -> Exception | None:
        """Rejection error, or None unless FAILED."""
        return self._error

    def then(
        self,
        on_ready: Callable[[T], None],
        on_failure: Callable[[Exception], None] | None = None,
    ) -> None:
        """
        Run `on_ready` with the endpoint once the handshake is READY.

        Args:
            on_ready: Called with the resolved value (immediately if already READY)
            on_failure: Called with the error if the handshake fails
                        (immediately if already FAILED)
        """
        if self._state is HandshakeState.READY:
            self._run(on_ready, self._value)
        elif self._state is HandshakeState.PENDING:
            self._queued.append((on_ready, on_failure))
        elif on_failure is not None:
            self._run(on_failure, self._error)

    def resolve(self, value: T) -> None:
        """Transition to READY and drain queued work in order."""
        if self._state is not HandshakeState.PENDING:
            logger.warning(f"Ignoring resolve of {self.name} handshake already {self._state.value}")
            return

        self._state = HandshakeState.READY
        self._value = value
        queued, self._queued = self._queued, []
        logger.debug(f"MIDI {self.name} ready, draining {len(queued)} queued operation(s)")

        for on_ready, _ in queued:
            self._run(on_ready, value)

    def reject(self, error: Exception) -> None:
        """Transition to FAILED and drop queued work."""
        if self._state is not HandshakeState.PENDING:
            logger.warning(f"Ignoring reject of {self.name} handshake already {self._state.value}")
            return

        self._state = HandshakeState.FAILED
        self._error = error
        queued, self._queued = self._queued, []
        logger.warning(f"MIDI {self.name} unavailable, dropped {len(queued)} queued operation(s): {error}")

        for _, on_failure in queued:
            if on_failure is not None:
                self._run(on_failure, error)

    def _run(self, callback: Callable, arg) -> None:
        # Errors stay isolated to the continuation that raised them
        try:
            callback(arg)
        except Exception as e:
            logger.error(f"Error in {self.name} handshake continuation: {e}", exc_info=True)

    def __repr__(self) -> str:
        return f"Handshake({self.name!r}, {self._state.value})"
