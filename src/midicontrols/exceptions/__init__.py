"""
Custom exception hierarchy for midicontrols.

## Exception Hierarchy

```
MidiControlsError (base)
├── ConfigurationError
│   ├── ControlConfigError (alias ConfigError)
│   ├── ConfigFileInvalidError
│   └── ConfigValidationError
└── TransportUnavailableError
```

All custom exceptions inherit from `MidiControlsError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Bad declaration

```python
from midicontrols.exceptions import ConfigError

raise ConfigError("wave.speed", "a range needs [min, max, value]", value=[0, 10])

# User sees: "Invalid control declaration 'wave.speed': a range needs [min, max, value]"
```

Configuration errors are fatal while the tree is built. Transport errors are
logged once by the binding that hit them and never abort the tree.
"""

from .base import MidiControlsError
from .config import (
    ConfigError,
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    ControlConfigError,
)
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_descriptor_error,
    wrap_pydantic_error,
)
from .transport import TransportUnavailableError

__all__ = [
    # Config
    "ConfigError",
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "ControlConfigError",
    # Handlers
    "ErrorContext",
    # Base
    "MidiControlsError",
    # Transport
    "TransportUnavailableError",
    "format_error_for_display",
    "wrap_descriptor_error",
    "wrap_pydantic_error",
]
