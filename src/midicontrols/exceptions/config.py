"""Configuration-related exceptions.

This module defines exceptions for configuration errors:
- ConfigurationError: Base class for configuration errors
- ControlConfigError: A control declaration has an unsupported shape
- ConfigFileInvalidError: A JSON file has invalid syntax
- ConfigValidationError: Settings values fail validation
"""

from typing import Any

from .base import MidiControlsError


class ConfigurationError(MidiControlsError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ControlConfigError(ConfigurationError):
    """A control declaration could not be turned into a descriptor."""

    def __init__(self, key: str, reason: str, value: Any = None):
        """
        Initialize control config error.

        Args:
            key: Dotted path of the offending entry (e.g. "wave.speed")
            reason: Why the entry was rejected
            value: The raw entry, for logging
        """
        super().__init__(
            user_message=f"Invalid control declaration '{key}': {reason}",
            technical_message=f"Control declaration {key}={value!r} rejected: {reason}",
            recoverable=False,
            recovery_hint=(
                "Declare a toggle as [value], a range as [min, max, value], "
                "a typed control as {'type': ..., ...} or a group as a nested mapping"
            ),
        )
        self.key = key
        self.reason = reason
        self.value = value


# Short name used throughout the builder.
ConfigError = ControlConfigError


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file has invalid JSON syntax."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid config file
            parse_error: The parsing error message
        """
        user_msg = "Configuration file has invalid syntax"
        recovery = "Check for common JSON errors:\n"
        recovery += "  - Trailing commas (remove commas after last item)\n"
        recovery += "  - Missing quotes around strings\n"
        recovery += "  - Unclosed braces or brackets\n"
        recovery += f"  - Edit: {file_path}"

        if "trailing comma" in parse_error.lower():
            user_msg = "Configuration file has a trailing comma"
            recovery = (
                f"Remove the trailing comma from {file_path}\n"
                "JSON doesn't allow commas after the last item in an object or array"
            )
        elif "expecting" in parse_error.lower():
            user_msg = "Configuration file has a syntax error"

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """Settings values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Initialize config validation error.

        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the config file (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if "index" in field.lower():
            recovery += "\nRun 'midicontrols midi list' to see valid port indices"
        elif "channel" in field.lower():
            recovery += "\nMIDI channels are numbered 0-15"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.field = field
        self.value = value
        self.file_path = file_path
