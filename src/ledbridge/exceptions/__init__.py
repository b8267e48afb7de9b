"""
Custom exception hierarchy for ledbridge.

## Exception Hierarchy

```
LedBridgeError (base)
├── ValidationError
├── DeviceConnectionError
│   └── DeviceUnavailableError
├── TransportError
│   ├── TransportIOError
│   ├── TransportTimeoutError
│   └── DisconnectedError
├── DeviceResponseError
│   ├── DeviceRejectedError
│   └── ResponseParseError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

## Usage

```python
from ledbridge.exceptions import ValidationError

raise ValidationError("brightness_percent", 150, "must be between 0 and 100")

# User sees: "Invalid value for 'brightness_percent': must be between 0 and 100"
# Logs show: "Validation failed for brightness_percent=150: must be between 0 and 100"
```

Validation failures never reach the serial link. Transport failures are
reported once after the link manager's single reopen attempt. The HTTP layer
only ever sees the coarse category of an error, details stay in the logs.
"""

from .base import LedBridgeError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import DeviceRejectedError, DeviceResponseError, ResponseParseError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
    wrap_serial_error,
)
from .link import (
    DeviceConnectionError,
    DeviceUnavailableError,
    DisconnectedError,
    TransportError,
    TransportIOError,
    TransportTimeoutError,
)
from .validation import ValidationError

__all__ = [
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Link
    "DeviceConnectionError",
    "DeviceUnavailableError",
    "DisconnectedError",
    "TransportError",
    "TransportIOError",
    "TransportTimeoutError",
    # Device responses
    "DeviceRejectedError",
    "DeviceResponseError",
    "ResponseParseError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
    "wrap_serial_error",
    # Base
    "LedBridgeError",
    "ValidationError",
]
