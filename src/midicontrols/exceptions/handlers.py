"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

| Scenario | Use This |
|----------|----------|
| Declaration shorthand rejected | `ControlConfigError` (alias `ConfigError`) |
| pydantic rejects a descriptor | `wrap_descriptor_error(e, key)` |
| pydantic rejects the settings file | `wrap_pydantic_error(e, path)` |
| MIDI port missing | `TransportUnavailableError` |
| Critical section with auto-logging | `with ErrorContext("bind controls"): ...` |

Transport errors never propagate out of the control tree: bindings log them
once and degrade to no-ops. Configuration errors always propagate.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .base import MidiControlsError
from .config import ConfigFileInvalidError, ConfigValidationError, ControlConfigError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("enable MIDI transport") as ctx:
            transport.enable()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        """Enter the context."""
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, MidiControlsError):
            self.logger.error(
                f"Failed to {self.operation}: {exc_val.technical_message}"
            )
        else:
            self.logger.error(
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        return not self.re_raise


def _format_loc(loc: tuple) -> str:
    # Discriminated unions prefix the location with the tag ("range", ...)
    return ".".join(str(part) for part in loc)


def wrap_descriptor_error(error: ValidationError, key: str) -> ControlConfigError:
    """
    Convert a pydantic validation error raised while building a descriptor.

    Args:
        error: The pydantic ValidationError
        key: Dotted path of the control being declared

    Returns:
        A ControlConfigError naming the control and the failing fields
    """
    reasons = []
    for err in error.errors():
        field = _format_loc(err.get("loc", ()))
        msg = err.get("msg", "validation failed")
        reasons.append(f"{field}: {msg}" if field else msg)

    return ControlConfigError(key, "; ".join(reasons) or str(error))


def wrap_pydantic_error(error: Exception, file_path: str) -> MidiControlsError:
    """
    Convert pydantic validation errors on a settings file to midicontrols exceptions.

    Args:
        error: The pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            return ConfigValidationError(
                field=_format_loc(first_error.get('loc', ('unknown',))),
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = [
                f"  - {_format_loc(err.get('loc', ('unknown',)))}: {err.get('msg', 'validation failed')}"
                for err in errors
            ]
            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=combined_msg,
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, MidiControlsError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
