"""Application settings model."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from midicontrols.exceptions import wrap_pydantic_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".midicontrols" / "config.json"


class AppConfig(BaseModel):
    """MIDI transport and binding settings."""

    input_index: int = Field(default=1, ge=0, description="Index of the MIDI input port to listen on")
    output_index: int = Field(default=1, ge=0, description="Index of the MIDI output port to send to")
    channel: int = Field(default=0, ge=0, le=15, description="MIDI channel (0-15) for outgoing messages")
    note_velocity: int = Field(
        default=127, ge=1, le=127, description="Velocity of note-on messages that light a toggle"
    )
    suppress_hardware_echo: bool = Field(
        default=True,
        description=(
            "Ignore the note release a device echoes back after a toggle's own "
            "note-off, so widget edits never register as pad presses"
        ),
    )

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load settings from file or return defaults.

        Args:
            path: Path to config file. If None, uses ~/.midicontrols/config.json.

        Raises:
            ConfigFileInvalidError: If the file has invalid JSON syntax
            ConfigValidationError: If values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        try:
            text = path.read_text()
        except FileNotFoundError:
            logger.info(f"No settings file at {path}, using defaults")
            return cls()

        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise wrap_pydantic_error(e, str(path)) from e

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
