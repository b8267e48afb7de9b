"""Configuration errors.

Raised while building a BridgeConfig from ~/.ledbridge/config.json or from
command-line overrides. They only occur at process start; the running
bridge never reloads its configuration.
"""

from typing import Any, Optional

from .base import LedBridgeError

# Operator advice per config field, shown under the CLI error banner
_FIELD_HINTS = {
    "serial_port": "Run 'ledbridge ports' to see the serial ports on this machine",
    "baud_rate": "LEDSC firmware talks at 115200 baud",
    "ack_timeout": "Timeouts are in seconds and must be greater than zero",
    "write_timeout": "Timeouts are in seconds and must be greater than zero",
    "port": "HTTP ports range from 1 to 65535",
    "static_dir": "Point static_dir at an existing directory or remove it",
}


class ConfigurationError(LedBridgeError):
    """Configuration is invalid or cannot be loaded."""

    category = "config"

    def __init__(self, user_message: str, source: Optional[str] = None, **kwargs):
        """
        Args:
            user_message: User-friendly error message
            source: Config file path, or "command line" for CLI overrides
        """
        super().__init__(user_message, **kwargs)
        self.source = source


class ConfigFileInvalidError(ConfigurationError):
    """Config file is empty or not JSON."""

    def __init__(self, file_path: str, parse_error: str):
        super().__init__(
            user_message=f"Configuration file {file_path} is not valid JSON",
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            source=file_path,
            recovery_hint=(
                f"Fix {file_path}, or delete it and run 'ledbridge config --save' "
                "to write the defaults"
            ),
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A config value is out of bounds or of the wrong type."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: Optional[str] = None):
        """
        Args:
            field: Config field name ("multiple fields" when several failed)
            value: The rejected value
            error_msg: Why the value is invalid
            file_path: Where the value came from
        """
        hint = _FIELD_HINTS.get(field, f"Correct '{field}'")
        if file_path:
            hint += f" (from {file_path})"

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            source=file_path,
            recovery_hint=hint,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
