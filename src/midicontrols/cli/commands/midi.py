"""MIDI command implementations."""

import contextlib
import logging
import time
from datetime import datetime

import click
import mido

from midicontrols.midi import MidiTransport, classify_message

logger = logging.getLogger(__name__)


@click.group(name="midi")
def midi_group():
    """MIDI device commands."""
    pass


@midi_group.command(name="list")
def list_midi():
    """List available MIDI ports with the indices the settings file uses."""
    ports = MidiTransport.list_ports()

    click.echo("MIDI Input Ports:\n")
    if not ports["input"]:
        click.echo("  No MIDI input ports found.")
    else:
        for i, port in enumerate(ports["input"]):
            click.echo(f"  [{i}] {port}")

    click.echo("\nMIDI Output Ports:\n")
    if not ports["output"]:
        click.echo("  No MIDI output ports found.")
    else:
        for i, port in enumerate(ports["output"]):
            click.echo(f"  [{i}] {port}")


@midi_group.command(name="monitor")
@click.option(
    "--all-messages/--bindable-only",
    default=False,
    help="Show every message, not only notes and control changes (default: bindable only)",
)
def monitor_midi(all_messages: bool):
    """
    Monitor all MIDI input ports and print incoming messages.

    Useful for finding the note and controller numbers to put in a
    declaration.

    Press Ctrl+C to stop monitoring.
    """
    names = mido.get_input_names()

    if not names:
        click.echo("No MIDI input ports found.")
        return

    click.echo(f"Monitoring {len(names)} MIDI input port(s):")
    for name in names:
        click.echo(f"  - {name}")
    click.echo("\nPress Ctrl+C to stop\n")

    ports = []
    try:
        for name in names:
            ports.append(mido.open_input(name))

        while True:
            for port in ports:
                for msg in port.iter_pending():
                    if not all_messages and classify_message(msg) is None:
                        continue
                    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
                    click.echo(f"[{timestamp}] {port.name}: {msg}")
            time.sleep(0.01)

    except KeyboardInterrupt:
        click.echo("\n\nStopping monitor...")

    finally:
        for port in ports:
            with contextlib.suppress(Exception):
                port.close()
