"""MIDI input/output endpoints shared by every binding in a tree.

An input endpoint fans incoming messages out to listeners subscribed per
event type; each binding filters by its own note or controller number.
An output endpoint turns normalized sends into mido messages.
"""

import logging
from collections.abc import Callable

import mido

from midicontrols.protocols import MidiEvent

logger = logging.getLogger(__name__)

MidiListener = Callable[[mido.Message], None]


def classify_message(msg: mido.Message) -> MidiEvent | None:
    """
    Map a mido message to the event type listeners subscribe to.

    Returns:
        The MidiEvent, or None for messages no binding cares about
    """
    if msg.type == 'note_on':
        # Note on with velocity 0 is actually note off
        return MidiEvent.NOTE_ON if msg.velocity > 0 else MidiEvent.NOTE_RELEASED
    if msg.type == 'note_off':
        return MidiEvent.NOTE_RELEASED
    if msg.type == 'control_change':
        return MidiEvent.CONTROL_CHANGE
    return None


class Subscription:
    """Handle returned by add_listener; cancel() detaches the listener."""

    def __init__(
        self,
        endpoint: "MidiInputEndpoint",
        event: MidiEvent,
        callback: MidiListener,
        channel: int | None,
    ):
        self.endpoint = endpoint
        self.event = event
        self.callback = callback
        self.channel = channel
        self.active = True

    def matches(self, msg: mido.Message) -> bool:
        return self.channel is None or msg.channel == self.channel

    def cancel(self) -> None:
        """Stop delivering messages to this listener (idempotent)."""
        if self.active:
            self.active = False
            self.endpoint._remove(self)


class MidiInputEndpoint:
    """
    Listener registry over an open mido input port.

    Messages are read with poll() on the caller's thread, so listener
    callbacks never run concurrently with widget callbacks.
    """

    def __init__(self, port: mido.ports.BaseInput):
        """
        Initialize the endpoint.

        Args:
            port: Open mido input port (opened without a callback)
        """
        self._port = port
        self._listeners: dict[MidiEvent, list[Subscription]] = {event: [] for event in MidiEvent}

    @property
    def name(self) -> str:
        return self._port.name

    def add_listener(
        self,
        event: MidiEvent,
        callback: MidiListener,
        channel: int | None = None,
    ) -> Subscription:
        """
        Subscribe to one event type.

        Args:
            event: Event type to receive
            callback: Function that receives the mido.Message
            channel: Only deliver messages on this channel (None = all channels)

        Returns:
            Subscription whose cancel() removes the listener
        """
        subscription = Subscription(self, event, callback, channel)
        self._listeners[event].append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        listeners = self._listeners[subscription.event]
        if subscription in listeners:
            listeners.remove(subscription)

    def listener_count(self, event: MidiEvent | None = None) -> int:
        """Number of active listeners, for one event type or all."""
        if event is not None:
            return len(self._listeners[event])
        return sum(len(listeners) for listeners in self._listeners.values())

    def dispatch(self, msg: mido.Message) -> None:
        """Deliver one message to every matching listener."""
        event = classify_message(msg)
        if event is None:
            return

        for subscription in list(self._listeners[event]):
            if not subscription.active or not subscription.matches(msg):
                continue
            try:
                subscription.callback(msg)
            except Exception as e:
                logger.error(f"Error in MIDI input listener: {e}", exc_info=True)

    def poll(self) -> int:
        """
        Dispatch every message waiting on the port.

        Returns:
            Number of messages read
        """
        count = 0
        for msg in self._port.iter_pending():
            self.dispatch(msg)
            count += 1
        return count

    def close(self) -> None:
        try:
            self._port.close()
        except Exception as e:
            logger.error(f"Error closing MIDI input port: {e}")


class MidiOutputEndpoint:
    """Sends normalized note and control-change messages to an open mido output port."""

    def __init__(self, port: mido.ports.BaseOutput, channel: int = 0, velocity: int = 127):
        """
        Initialize the endpoint.

        Args:
            port: Open mido output port
            channel: MIDI channel (0-15) for every outgoing message
            velocity: Velocity used by send_note_on
        """
        self._port = port
        self.channel = channel
        self.velocity = velocity

    @property
    def name(self) -> str:
        return self._port.name

    def send(self, message: mido.Message) -> bool:
        """
        Send a MIDI message.

        Returns:
            True if sent successfully, False if the port rejected it
        """
        try:
            self._port.send(message)
            return True
        except Exception as e:
            logger.error(f"Error sending MIDI message {message}: {e}")
            return False

    def send_note_on(self, note: int) -> bool:
        return self.send(mido.Message('note_on', note=note, velocity=self.velocity, channel=self.channel))

    def send_note_off(self, note: int) -> bool:
        return self.send(mido.Message('note_off', note=note, velocity=0, channel=self.channel))

    def send_control_change(self, control: int, value: int) -> bool:
        return self.send(mido.Message('control_change', control=control, value=value, channel=self.channel))

    def close(self) -> None:
        try:
            self._port.close()
        except Exception as e:
            logger.error(f"Error closing MIDI output port: {e}")
