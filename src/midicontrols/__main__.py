"""Allow running as `python -m midicontrols`."""

from midicontrols.cli.main import cli

if __name__ == "__main__":
    cli()
