"""Data models for control trees."""

from .config import AppConfig
from .descriptor import (
    ControlDescriptor,
    DescriptorAdapter,
    RangeDescriptor,
    RangeLoopDescriptor,
    ToggleDescriptor,
)
from .enums import ControlKind, ControlSource

__all__ = [
    "AppConfig",
    # Descriptors
    "ControlDescriptor",
    # Enums
    "ControlKind",
    "ControlSource",
    "DescriptorAdapter",
    "RangeDescriptor",
    "RangeLoopDescriptor",
    "ToggleDescriptor",
]
