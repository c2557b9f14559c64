"""MIDI transport: enable handshake and shared endpoints."""

import logging
from typing import TYPE_CHECKING

import mido

from midicontrols.exceptions import TransportUnavailableError

from .endpoints import MidiInputEndpoint, MidiOutputEndpoint
from .handshake import Handshake

if TYPE_CHECKING:
    from midicontrols.models import AppConfig

logger = logging.getLogger(__name__)


class MidiTransport:
    """
    Opens one MIDI input and one MIDI output port by index.

    Bindings register work on `input` and `output` before or after
    enable(); work registered earlier is queued by the handshakes and runs
    in registration order once the ports are open. If a port cannot be
    opened its handshake fails and every binding relying on it goes inert.

    Example:
        ```python
        transport = MidiTransport.from_config(AppConfig.load_or_default())
        controls = Controls(declaration, container, transport=transport)
        transport.enable()
        while running:
            transport.poll()
        ```
    """

    def __init__(
        self,
        input_index: int = 1,
        output_index: int = 1,
        channel: int = 0,
        note_velocity: int = 127,
    ):
        """
        Initialize the transport (no ports are opened until enable()).

        Args:
            input_index: Index into mido.get_input_names()
            output_index: Index into mido.get_output_names()
            channel: MIDI channel (0-15) for outgoing messages
            note_velocity: Velocity of outgoing note-on messages
        """
        self.input_index = input_index
        self.output_index = output_index
        self.channel = channel
        self.note_velocity = note_velocity
        self.input: Handshake[MidiInputEndpoint] = Handshake("input")
        self.output: Handshake[MidiOutputEndpoint] = Handshake("output")

    @classmethod
    def from_config(cls, config: "AppConfig") -> "MidiTransport":
        return cls(
            input_index=config.input_index,
            output_index=config.output_index,
            channel=config.channel,
            note_velocity=config.note_velocity,
        )

    def enable(self) -> None:
        """
        Open the ports and settle both handshakes.

        Never raises for missing devices: failures are recorded on the
        handshakes as TransportUnavailableError.
        """
        if not self.input.is_pending and not self.output.is_pending:
            logger.warning("MidiTransport is already enabled")
            return

        self._enable_input()
        self._enable_output()

    def _enable_input(self) -> None:
        try:
            names = mido.get_input_names()
            if self.input_index >= len(names):
                raise TransportUnavailableError("input", self.input_index)
            port = mido.open_input(names[self.input_index])
        except TransportUnavailableError as e:
            self.input.reject(e)
            return
        except Exception as e:
            self.input.reject(TransportUnavailableError("input", self.input_index, str(e)))
            return

        logger.info(f"Connected to MIDI input: {port.name}")
        self.input.resolve(MidiInputEndpoint(port))

    def _enable_output(self) -> None:
        try:
            names = mido.get_output_names()
            if self.output_index >= len(names):
                raise TransportUnavailableError("output", self.output_index)
            port = mido.open_output(names[self.output_index])
        except TransportUnavailableError as e:
            self.output.reject(e)
            return
        except Exception as e:
            self.output.reject(TransportUnavailableError("output", self.output_index, str(e)))
            return

        logger.info(f"Connected to MIDI output: {port.name}")
        self.output.resolve(MidiOutputEndpoint(port, channel=self.channel, velocity=self.note_velocity))

    def poll(self) -> int:
        """
        Dispatch pending input messages to bindings.

        Returns:
            Number of messages read (0 when the input is not ready)
        """
        if not self.input.is_ready:
            return 0
        return self.input.value.poll()

    def close(self) -> None:
        """Close any open ports."""
        if self.input.is_ready:
            self.input.value.close()
        if self.output.is_ready:
            self.output.value.close()
        logger.debug("MidiTransport closed")

    @staticmethod
    def list_ports() -> dict:
        """
        List all available MIDI ports.

        Returns:
            Dictionary with 'input' and 'output' lists of port names
        """
        return {
            'input': mido.get_input_names(),
            'output': mido.get_output_names()
        }

    def __enter__(self):
        """Context manager entry."""
        self.enable()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
