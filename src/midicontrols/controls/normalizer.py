"""Declaration shorthand to typed descriptors.

A control tree is declared as a plain mapping. Each entry is one of:

    speed:  [0, 10, 3]                          # range: [min, max, value]
    active: [True]                              # toggle: [value]
    hue:    [{"step": 0.5, "controller": 21}, 0, 360, 90]   # with settings
    mode:   {"type": "toggle", "value": False, "note": "C4"}  # typed
    wave:   {"speed": [0, 10, 3], "closed": True}            # group

A range shorthand gets a default step of |max - min| / 1280.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from midicontrols.exceptions import ConfigError, wrap_descriptor_error
from midicontrols.models import ControlDescriptor, DescriptorAdapter

logger = logging.getLogger(__name__)

# Default number of slider steps across a range
DEFAULT_STEP_DIVISIONS = 1280

# Key holding a folder's collapsed flag, at any level of the declaration
CLOSED_KEY = "closed"

# Keys accepted in the leading settings object of a shorthand sequence
SETTINGS_KEYS = frozenset({"step", "note", "controller", "loop"})


def is_typed_entry(raw: Any) -> bool:
    return isinstance(raw, Mapping) and "type" in raw


def is_group_entry(raw: Any) -> bool:
    """Any mapping without a `type` field declares a group."""
    return isinstance(raw, Mapping) and "type" not in raw


def is_closed_flag(key: str, raw: Any) -> bool:
    return key == CLOSED_KEY and isinstance(raw, bool)


def check_key(key: Any, path: str, raw: Any) -> None:
    """
    Reject names that cannot label a control.

    Raises:
        ConfigError: For empty or non-string names, or a non-bool `closed` entry
    """
    if not isinstance(key, str) or not key:
        raise ConfigError(path or repr(key), "names must be non-empty strings", raw)
    if key == CLOSED_KEY and not isinstance(raw, bool):
        raise ConfigError(path, f"'{CLOSED_KEY}' is reserved for the folder's collapsed flag", raw)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def expand_shorthand(key: str, raw: list | tuple) -> dict:
    """
    Expand a shorthand sequence into a descriptor mapping.

    Args:
        key: Dotted path of the entry, for error messages
        raw: [value], [min, max, value], optionally led by a settings mapping

    Raises:
        ConfigError: For any other length, non-numeric bounds or unknown settings
    """
    items = list(raw)
    settings: dict = {}
    if items and isinstance(items[0], Mapping):
        settings = dict(items.pop(0))

    if len(items) == 1:
        data = {"type": "toggle", "value": items[0]}
    elif len(items) == 3:
        lo, hi, value = items
        if not (_is_number(lo) and _is_number(hi)):
            raise ConfigError(key, "range bounds must be numbers", raw)
        data = {
            "type": "range",
            "min": lo,
            "max": hi,
            "step": abs(hi - lo) / DEFAULT_STEP_DIVISIONS,
            "value": value,
        }
    else:
        raise ConfigError(
            key, f"expected [value] or [min, max, value], got {len(items)} element(s)", raw
        )

    unknown = set(settings) - SETTINGS_KEYS
    if unknown:
        raise ConfigError(key, f"unknown settings {sorted(unknown)}", raw)

    data.update(settings)
    return data


def normalize_entry(key: str, raw: Any) -> ControlDescriptor:
    """
    Produce exactly one typed descriptor for a leaf entry.

    Args:
        key: Dotted path of the entry (e.g. "wave.speed")
        raw: Shorthand sequence or typed mapping

    Returns:
        Validated ToggleDescriptor, RangeDescriptor or RangeLoopDescriptor

    Raises:
        ConfigError: If the entry has an unsupported shape or invalid values
    """
    if is_typed_entry(raw):
        data = dict(raw)
    elif isinstance(raw, (list, tuple)):
        data = expand_shorthand(key, raw)
    else:
        raise ConfigError(key, f"unsupported declaration of type {type(raw).__name__}", raw)

    try:
        descriptor = DescriptorAdapter.validate_python(data)
    except ValidationError as e:
        raise wrap_descriptor_error(e, key) from e

    logger.debug(f"Normalized {key}: {descriptor!r}")
    return descriptor


def normalize(config: Mapping, parent: str = "") -> dict:
    """
    Normalize a whole declaration without building widgets.

    Returns:
        Same hierarchy with every leaf replaced by its descriptor mapping
        and `closed` flags kept

    Raises:
        ConfigError: On the first malformed entry
    """
    if not isinstance(config, Mapping):
        raise ConfigError(parent or "<root>", "a declaration must be a mapping of names", config)

    result: dict = {}
    for key, raw in config.items():
        path = f"{parent}.{key}" if parent else str(key)
        check_key(key, path, raw)
        if is_closed_flag(key, raw):
            result[key] = raw
        elif is_group_entry(raw):
            result[key] = normalize(raw, path)
        else:
            result[key] = normalize_entry(path, raw).to_config()
    return result
