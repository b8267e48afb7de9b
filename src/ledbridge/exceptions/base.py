"""Base exception class for ledbridge.

Every bridge error carries two messages and a coarse category::

    LedBridgeError
      ├─ user_message       shown by the CLI banner and in HTTP bodies
      ├─ technical_message  logs only (port paths, raw frames, errno text)
      ├─ category           stable string: "validation", "timeout", "io", ...
      ├─ recoverable        True if the same request may succeed later
      └─ recovery_hint      operator advice, CLI only

The HTTP layer answers a recoverable failure with a Retry-After header; the
CLI prints the hint under the error banner.
"""

from typing import Optional


class LedBridgeError(Exception):
    """Base exception for all ledbridge errors."""

    category = "error"

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        *,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def log_line(self) -> str:
        """Single line for the log, tagged with the category."""
        return f"[{self.category}] {self.technical_message}"

