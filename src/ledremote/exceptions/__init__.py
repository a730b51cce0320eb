"""
Custom exception hierarchy for ledremote.

## Exception Hierarchy

```
LedRemoteError (base)
├── DeviceError
│   ├── DeviceConnectionError
│   ├── DeviceRequestError
│   │   └── FirmwareServerError
│   ├── HttpStatusError
│   ├── ResponseValidationError
│   └── InvalidAddressError
├── ConnectionStateError
│   ├── InvalidTransitionError
│   └── NotConnectedError
├── PatternEditError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions carry a `user_message` for the status line, a
`technical_message` for the log, and an optional `recovery_hint`.

### Example: Probe Failure

```python
from ledremote.exceptions import DeviceConnectionError

raise DeviceConnectionError("192.168.1.50", original_error="Connection refused")

# User sees: "Could not connect to the device at 192.168.1.50."
# Logs show: "Probe of 192.168.1.50 failed: Connection refused"
```

See `ledremote.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import LedRemoteError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import (
    DeviceConnectionError,
    DeviceError,
    DeviceRequestError,
    FirmwareServerError,
    HttpStatusError,
    InvalidAddressError,
    ResponseValidationError,
)
from .handlers import (
    ErrorContext,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
)
from .state import (
    ConnectionStateError,
    InvalidTransitionError,
    NotConnectedError,
    PatternEditError,
)

__all__ = [
    # Base
    "LedRemoteError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Device
    "DeviceConnectionError",
    "DeviceError",
    "DeviceRequestError",
    "FirmwareServerError",
    "HttpStatusError",
    "InvalidAddressError",
    "ResponseValidationError",
    # State
    "ConnectionStateError",
    "InvalidTransitionError",
    "NotConnectedError",
    "PatternEditError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
]
