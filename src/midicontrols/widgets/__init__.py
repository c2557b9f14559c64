"""Widget toolkit contract and the headless reference toolkit."""

from .headless import HeadlessContainer, HeadlessInput
from .protocols import WidgetContainer, WidgetHandle

__all__ = ["HeadlessContainer", "HeadlessInput", "WidgetContainer", "WidgetHandle"]
