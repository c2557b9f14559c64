"""Hardware bindings: one pad or knob on the shared MIDI transport.

A binding subscribes to the transport input filtered by its own note or
controller number, turns raw messages into normalized notifications for the
control that owns it, and turns normalized values back into outgoing MIDI.

- ToggleBinding: a note; emits `on_press` on release, lights the pad with
  note on/off.
- RotaryBinding: a control change; emits `on_change(delta)` with 0/127
  wraparound correction, reflects the value as a 7-bit control change.
"""

import logging
import math
from collections.abc import Callable

import mido

from midicontrols.observer import ObserverManager
from midicontrols.protocols import BindingEvent, BindingObserver, MidiEvent

from .endpoints import MidiOutputEndpoint, Subscription
from .notes import note_number
from .transport import MidiTransport

logger = logging.getLogger(__name__)

MIDI_MIN = 0
MIDI_MAX = 127

_CALLBACKS = {
    BindingEvent.PRESS: "on_press",
    BindingEvent.CHANGE: "on_change",
    BindingEvent.UNAVAILABLE: "on_binding_unavailable",
}


class HardwareBinding:
    """
    Shared plumbing for bindings: queued subscriptions and sends, one-time
    unavailability report, release.
    """

    def __init__(self, transport: MidiTransport, observer: BindingObserver | None = None):
        self._transport = transport
        self._observers = ObserverManager[BindingObserver](observer_type_name="binding")
        if observer is not None:
            self._observers.register(observer)
        self._subscriptions: list[Subscription] = []
        self._released = False
        self._unavailable = False

    def register_observer(self, observer: BindingObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: BindingObserver) -> None:
        self._observers.unregister(observer)

    @property
    def available(self) -> bool:
        """False once the transport handshake has failed or the binding was released."""
        return not (self._unavailable or self._released)

    def _emit(self, event: BindingEvent, *args) -> None:
        self._observers.notify(_CALLBACKS[event], self, *args)

    def _subscribe(self, event: MidiEvent, callback: Callable[[mido.Message], None]) -> None:
        def attach(endpoint) -> None:
            if not self._released:
                self._subscriptions.append(endpoint.add_listener(event, callback))

        self._transport.input.then(attach, self._report_unavailable)

    def _send(self, action: Callable[[MidiOutputEndpoint], None]) -> None:
        def send(endpoint: MidiOutputEndpoint) -> None:
            if not self._released:
                action(endpoint)

        self._transport.output.then(send, self._report_unavailable)

    def _report_unavailable(self, error: Exception) -> None:
        if self._unavailable:
            return
        self._unavailable = True
        logger.warning(f"{self} disabled, MIDI unavailable: {error}")
        self._emit(BindingEvent.UNAVAILABLE, error)

    def release(self) -> None:
        """Detach from the transport; later sends and messages are ignored."""
        self._released = True
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._observers.clear()


class ToggleBinding(HardwareBinding):
    """
    A pad or key: note release requests a flip, note on/off shows the state.

    A release only counts when the previous message for the note was not
    also a release, so one physical edge flips the toggle exactly once even
    if a device repeats note-off messages.
    """

    def __init__(
        self,
        transport: MidiTransport,
        note: int | str,
        value: bool = False,
        suppress_echo: bool = True,
        observer: BindingObserver | None = None,
    ):
        """
        Initialize the binding and queue the initial LED state.

        Args:
            transport: Shared MIDI transport
            note: MIDI note number or name (e.g. "C4")
            value: Initial state to show
            suppress_echo: Swallow the release a device echoes back after
                           each note-off this binding sends
            observer: Registered before any transport work is queued
        """
        super().__init__(transport, observer)
        self.note = note_number(note)
        self.suppress_echo = suppress_echo
        self.value = bool(value)
        self._released_last = False
        self._pending_echoes = 0

        self._subscribe(MidiEvent.NOTE_ON, self._on_note_on)
        self._subscribe(MidiEvent.NOTE_RELEASED, self._on_note_released)
        self.set_value(value)

    def set_value(self, on: bool) -> None:
        """Light (note on) or clear (note off) the pad once the output is ready."""
        self.value = bool(on)
        note = self.note

        if self.value:
            self._send(lambda output: output.send_note_on(note))
            return

        def stop(output: MidiOutputEndpoint) -> None:
            if self.suppress_echo:
                self._pending_echoes += 1
            output.send_note_off(note)

        self._send(stop)

    def _on_note_on(self, msg: mido.Message) -> None:
        if msg.note == self.note:
            # a physical press; any echo still owed is not coming
            self._released_last = False
            self._pending_echoes = 0

    def _on_note_released(self, msg: mido.Message) -> None:
        if msg.note != self.note:
            return

        if self._pending_echoes:
            self._pending_echoes -= 1
            self._released_last = True
            logger.debug(f"Ignoring echoed release of note {self.note}")
            return

        if self._released_last:
            logger.debug(f"Ignoring repeated release of note {self.note}")
            return

        self._released_last = True
        logger.debug(f"Pad released: note {self.note}")
        self._emit(BindingEvent.PRESS)

    def __repr__(self) -> str:
        return f"ToggleBinding(note={self.note})"


class RotaryBinding(HardwareBinding):
    """
    A knob: control changes become signed tick deltas, values are shown as
    7-bit control changes.

    `value` mirrors the last 7-bit value sent. Incoming messages do not
    update it; the owning control computes the new value and pushes it
    back through set_value().
    """

    def __init__(
        self,
        transport: MidiTransport,
        controller: int,
        value: float,
        min: float,
        max: float,
        observer: BindingObserver | None = None,
    ):
        """
        Initialize the binding and queue the initial knob position.

        Args:
            transport: Shared MIDI transport
            controller: MIDI CC number (0-127)
            value: Initial value in [min, max]
            min: Value mapped to 0
            max: Value mapped to 127
            observer: Registered before any transport work is queued
        """
        super().__init__(transport, observer)
        self.controller = controller
        self.min = min
        self.max = max
        self.value = MIDI_MIN

        self._subscribe(MidiEvent.CONTROL_CHANGE, self._on_control_change)
        self.set_value(value)

    def rescale(self, min: float, max: float) -> None:
        """Change the range that maps onto 0-127."""
        if min >= max:
            raise ValueError(f"min ({min}) must be less than max ({max})")
        self.min = min
        self.max = max

    def normalize(self, value: float) -> int:
        """Map a value in [min, max] onto 0-127."""
        raw = math.floor(MIDI_MAX * (value - self.min) / (self.max - self.min))
        return max(MIDI_MIN, min(MIDI_MAX, raw))

    def set_value(self, value: float) -> None:
        """Store the 7-bit position and send it once the output is ready."""
        self.value = self.normalize(value)
        raw = self.value
        controller = self.controller
        self._send(lambda output: output.send_control_change(controller, raw))

    def delta_for(self, raw: int) -> int:
        """
        Ticks between the last position and an incoming raw value.

        An endless encoder spinning past either end keeps reporting the
        boundary value; a repeated 127 counts as +1 and a repeated 0 as -1.
        """
        delta = raw - self.value
        if delta == 0 and raw == MIDI_MAX:
            return 1
        if delta == 0 and raw == MIDI_MIN:
            return -1
        return delta

    def _on_control_change(self, msg: mido.Message) -> None:
        if msg.control != self.controller:
            return

        delta = self.delta_for(msg.value)
        if delta:
            self._emit(BindingEvent.CHANGE, delta)

    def __repr__(self) -> str:
        return f"RotaryBinding(controller={self.controller})"
