"""
Centralized error handling utilities.

## Handling Patterns

| Pattern | Code |
|---------|------|
| Log and re-raise | `@handle_errors(operation_name="probe", re_raise=True)` |
| Log and fall back | `@handle_errors(operation_name="list serial ports", fallback_value=[], re_raise=False)` |
| Critical section with auto-logging | `with ErrorContext("open serial link"): ...` |
| Convert pyserial failures | `raise wrap_serial_error(e, port) from e` |
| Convert config failures | `raise wrap_pydantic_error(e, str(path)) from e` |

## Architecture: The Three-Layer Model

```
┌─────────────────────────────────────────┐
│  USER LAYER (HTTP/CLI)              │
│  - Maps errors to 400/503           │
│  - Shows error.user_message         │
└─────────────────────────────────────────┘
                  ↑
                  │ LedBridgeError
                  │
┌─────────────────────────────────────────┐
│  BRIDGE LAYER (Dispatcher, Link)    │
│  - Catches low-level exceptions     │
│  - Converts to LedBridgeError       │
└─────────────────────────────────────────┘
                  ↑
                  │ SerialException, OSError
                  │
┌─────────────────────────────────────────┐
│  LOW LEVEL (pyserial, OS)           │
└─────────────────────────────────────────┘
```
"""

import errno
import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

from .base import LedBridgeError
from .config import ConfigFileInvalidError, ConfigValidationError
from .link import DeviceConnectionError, DeviceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# errno values that mean "the path is missing or somebody else holds it"
_UNAVAILABLE_ERRNOS = {errno.ENOENT, errno.EBUSY, errno.EACCES, errno.ENODEV, errno.ENXIO}


def handle_errors(
    *,
    operation_name: str,
    fallback_value: Optional[T] = None,
    re_raise: bool = True
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "list serial ports")
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)

            except LedBridgeError as e:
                logger.error(f"Failed to {operation_name}: {e.log_line()}")
                if re_raise:
                    raise
                return fallback_value

            except Exception as e:
                logger.error(f"Unexpected error during {operation_name}: {e}", exc_info=True)
                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("open serial link", re_raise=False) as ctx:
            link.open()

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
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, LedBridgeError):
            self.logger.error(
                f"Failed to {self.operation}: {exc_val.log_line()}"
            )
        else:
            self.logger.error(
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        # Return True to suppress exception, False to re-raise
        return not self.re_raise


def wrap_serial_error(error: Exception, port: str) -> LedBridgeError:
    """
    Convert a failure to open a serial port into a ledbridge exception.

    pyserial wraps the OS error in SerialException; the errno survives either
    as the exception's own errno or inside the message text.

    Args:
        error: The original exception from pyserial or the OS
        port: The port path or URL that failed to open

    Returns:
        DeviceUnavailableError for missing/busy ports, DeviceConnectionError otherwise
    """
    error_msg = str(error)
    code = getattr(error, "errno", None)

    if code in _UNAVAILABLE_ERRNOS:
        return DeviceUnavailableError(port, original_error=error_msg)

    lowered = error_msg.lower()
    if (
        "could not open port" in lowered
        or "no such file" in lowered
        or "resource busy" in lowered
        or "could not exclusively lock" in lowered
        or isinstance(error, FileNotFoundError)
    ):
        return DeviceUnavailableError(port, original_error=error_msg)

    return DeviceConnectionError(
        user_message=f"Could not connect to the LED controller on {port}",
        technical_message=f"Serial open of {port} failed: {error_msg}",
        port=port,
        recoverable=True,
    )


def wrap_pydantic_error(error: Exception, file_path: str) -> LedBridgeError:
    """
    Convert Pydantic validation errors to ledbridge configuration exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError as PydanticValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, PydanticValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
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

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, LedBridgeError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
