"""Control tree command implementations.

Every command loads a JSON declaration, builds the tree in a headless
container and prints JSON to stdout.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

import click

from midicontrols.controls import Controls, normalize
from midicontrols.exceptions import (
    ConfigFileInvalidError,
    ErrorContext,
    MidiControlsError,
    format_error_for_display,
)
from midicontrols.midi import MidiTransport
from midicontrols.models import AppConfig, ControlSource
from midicontrols.widgets import HeadlessContainer

logger = logging.getLogger(__name__)

DECLARATION = click.argument(
    "declaration", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


def load_json(path: Path) -> Any:
    """
    Read a JSON document.

    Raises:
        ConfigFileInvalidError: If the file is not valid JSON
    """
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigFileInvalidError(str(path), str(e)) from e


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def fail(ctx: click.Context, error: Exception) -> None:
    """Show a clean error message and exit with status 1."""
    logger.error(f"Command failed: {error}", exc_info=not isinstance(error, MidiControlsError))
    user_message, recovery_hint = format_error_for_display(error)

    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    log_path = (ctx.obj or {}).get("log_path")
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
    sys.exit(1)


def build_tree(path: Path, state_path: Path | None = None) -> Controls:
    """Load a declaration into a headless tree, optionally restoring a state snapshot."""
    with ErrorContext(f"build control tree from {path}", logger):
        controls = Controls(load_json(path), HeadlessContainer())
        if state_path is not None:
            controls.restore_state(load_json(state_path))
    return controls


class ChangePrinter:
    """Control observer printing one JSON line per applied change."""

    def on_control_changed(self, path: str, value: Any, source: ControlSource) -> None:
        click.echo(json.dumps({"path": path, "value": value, "source": source.value}))


@click.group(name="tree")
def tree_group():
    """Build control trees from JSON declarations."""
    pass


@tree_group.command(name="uniforms")
@DECLARATION
@click.option(
    "--state",
    "state_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="State snapshot to restore before flattening",
)
@click.option("--prefix", default="", help="Leading segment for every name (e.g. 'u')")
@click.pass_context
def uniforms(ctx, declaration: Path, state_path: Path | None, prefix: str):
    """Print the flattened uniform names and values."""
    try:
        controls = build_tree(declaration, state_path)
    except MidiControlsError as e:
        fail(ctx, e)
    echo_json(controls.flatten_to_uniforms(prefix=prefix))


@tree_group.command(name="state")
@DECLARATION
@click.pass_context
def state(ctx, declaration: Path):
    """Print the state snapshot of a freshly built tree."""
    try:
        controls = build_tree(declaration)
    except MidiControlsError as e:
        fail(ctx, e)
    echo_json(controls.snapshot_state())


@tree_group.command(name="config")
@DECLARATION
@click.option(
    "--state",
    "state_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="State snapshot to restore before snapshotting",
)
@click.pass_context
def config(ctx, declaration: Path, state_path: Path | None):
    """Print the full, re-loadable declaration with current values."""
    try:
        controls = build_tree(declaration, state_path)
    except MidiControlsError as e:
        fail(ctx, e)
    echo_json(controls.snapshot_config())


@tree_group.command(name="normalize")
@DECLARATION
@click.pass_context
def normalize_cmd(ctx, declaration: Path):
    """Validate a declaration and print every leaf as a typed descriptor."""
    try:
        with ErrorContext(f"normalize {declaration}", logger):
            result = normalize(load_json(declaration))
    except MidiControlsError as e:
        fail(ctx, e)
    echo_json(result)


@tree_group.command(name="run")
@DECLARATION
@click.option(
    "--interval",
    type=click.FloatRange(min=0.001),
    default=0.01,
    help="Seconds between MIDI polls and loop updates (default: 0.01)",
)
@click.option(
    "--duration",
    type=click.FloatRange(min=0),
    default=0,
    help="Stop after this many seconds (default: run until Ctrl+C)",
)
@click.option(
    "--save-state",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the state snapshot here on exit",
)
@click.pass_context
def run(ctx, declaration: Path, interval: float, duration: float, save_state: Path | None):
    """
    Bind a tree to the configured MIDI ports and print every change.

    Port indices, channel and echo handling come from the settings file.
    Missing ports are reported once; the tree keeps running without them.

    Press Ctrl+C to stop.
    """
    config_path = (ctx.obj or {}).get("config_path")
    try:
        settings = AppConfig.load_or_default(config_path)
        transport = MidiTransport.from_config(settings)
        with ErrorContext(f"build control tree from {declaration}", logger):
            controls = Controls(
                load_json(declaration),
                HeadlessContainer(),
                transport=transport,
                suppress_echo=settings.suppress_hardware_echo,
            )
    except MidiControlsError as e:
        fail(ctx, e)

    controls.register_observer(ChangePrinter())
    transport.enable()
    for handshake in (transport.input, transport.output):
        if handshake.is_failed:
            click.echo(f"WARNING: {handshake.error}", err=True)

    click.echo(f"Running {len(controls.children)} control(s), press Ctrl+C to stop", err=True)
    started = last = time.monotonic()
    try:
        while not duration or last - started < duration:
            time.sleep(interval)
            now = time.monotonic()
            transport.poll()
            controls.advance(now - last)
            last = now
    except KeyboardInterrupt:
        click.echo("\nStopping...", err=True)
    finally:
        if save_state is not None:
            save_state.write_text(json.dumps(controls.snapshot_state(), indent=2))
            logger.info(f"Saved state to {save_state}")
        controls.release()
        transport.close()
