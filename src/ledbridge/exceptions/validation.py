"""Input validation exceptions.

Raised by the encoder and the dispatcher when a request value is missing,
malformed or out of range. Always the caller's fault, never retried.
"""

from typing import Any

from .base import LedBridgeError


class ValidationError(LedBridgeError):
    """A request parameter failed validation."""

    category = "validation"

    def __init__(self, field: str, value: Any, error_msg: str):
        """
        Initialize validation error.

        Args:
            field: Name of the offending parameter
            value: The rejected value (as received)
            error_msg: Why the value is invalid
        """
        super().__init__(
            user_message=f"Invalid value for '{field}': {error_msg}",
            technical_message=f"Validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=f"Check the '{field}' parameter and resend the request",
        )
        self.field = field
        self.value = value
        self.error_msg = error_msg
