"""
Command dispatcher: the request-shaped surface of the bridge.

The dispatcher is the only component that knows incoming parameter names
and their raw shapes (integer strings, '#rrggbb'). It validates, encodes,
forwards to the link manager, and folds every outcome into a DispatchResult
with a stable category. Details of transport failures go to the log only.

    raw input ──parse──▶ domain value ──encode──▶ Command ──send──▶ Ack
        │                                                           │
        └── ValidationError → BAD_REQUEST     TransportError etc. → SERVICE_UNAVAILABLE

No retries happen here; a failed send is reported once.
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from ledbridge.exceptions import (
    DeviceConnectionError,
    DeviceResponseError,
    LedBridgeError,
    TransportError,
    ValidationError,
)
from ledbridge.link import LinkManager
from ledbridge.models import Color, Command, Effect, Palette
from ledbridge.protocol import (
    encode_brightness,
    encode_color,
    encode_debugging,
    encode_effect,
    encode_enter_bootloader,
    encode_fire_palette,
    encode_full_reset,
    encode_get_status,
)

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_TRUE = {"1", "true", "on", "yes"}
_FALSE = {"0", "false", "off", "no"}


class Outcome(str, Enum):
    """Caller-facing result of an operation."""

    SUCCESS = "success"
    BAD_REQUEST = "bad_request"
    SERVICE_UNAVAILABLE = "service_unavailable"


class DispatchResult(BaseModel):
    """Outcome of one dispatched operation."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    category: str
    message: str
    detail: tuple[str, ...] = ()
    retryable: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def success(cls, detail: tuple[str, ...] = ()) -> "DispatchResult":
        return cls(outcome=Outcome.SUCCESS, category="ok", message="OK", detail=detail)

    @classmethod
    def from_error(cls, error: LedBridgeError) -> "DispatchResult":
        if isinstance(error, ValidationError):
            return cls(outcome=Outcome.BAD_REQUEST, category=error.category, message=error.user_message)
        return cls(
            outcome=Outcome.SERVICE_UNAVAILABLE,
            category=error.category,
            message=error.user_message,
            retryable=error.recoverable,
        )


def parse_int(raw: Any, field: str) -> int:
    """Parse an integer given as int or decimal string. Floats and bools are rejected."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError(field, raw, "is required")
    if isinstance(raw, bool):
        raise ValidationError(field, raw, "must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INTEGER.fullmatch(raw.strip()):
        try:
            return int(raw.strip())
        except ValueError:
            # Longer than the interpreter will convert
            raise ValidationError(field, raw[:20] + "...", "is out of range") from None
    raise ValidationError(field, raw, "must be an integer")


def parse_bool(raw: Any, field: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        raise ValidationError(field, raw, "is required")
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValidationError(field, raw, "must be true or false")


def parse_effect(raw: Any) -> Effect:
    effect_id = parse_int(raw, "effect_id")
    try:
        return Effect(effect_id)
    except ValueError:
        raise ValidationError(
            "effect_id", raw, f"must be one of {[e.value for e in Effect]}"
        ) from None


def parse_palette(raw: Any) -> Palette:
    palette_id = parse_int(raw, "palette_id")
    try:
        return Palette(palette_id)
    except ValueError:
        raise ValidationError(
            "palette_id", raw, f"must be one of {[p.value for p in Palette]}"
        ) from None


def parse_color(raw: Any) -> Color:
    if raw is None:
        raise ValidationError("color", raw, "is required")
    return Color.from_hex(raw)


class CommandDispatcher:
    """Validates raw request values and drives the link manager."""

    def __init__(self, link: LinkManager):
        self._link = link

    @property
    def link(self) -> LinkManager:
        return self._link

    # ================================================================
    # LIGHTING OPERATIONS
    # ================================================================

    def set_brightness(self, raw: Any) -> DispatchResult:
        """Set brightness from a percentage (integer string, 0-100)."""
        return self._dispatch("set brightness", lambda: encode_brightness(parse_int(raw, "brightness_percent")))

    def set_effect(self, raw: Any) -> DispatchResult:
        """Select an effect by id (integer string)."""
        return self._dispatch("set effect", lambda: encode_effect(parse_effect(raw)))

    def set_color(self, raw: Any) -> DispatchResult:
        """Set the solid color from a '#rrggbb' string."""
        return self._dispatch("set color", lambda: encode_color(parse_color(raw)))

    def set_fire_palette(self, raw: Any) -> DispatchResult:
        """Select a fire palette by id (integer string)."""
        return self._dispatch("set fire palette", lambda: encode_fire_palette(parse_palette(raw)))

    # ================================================================
    # DIAGNOSTICS
    # ================================================================

    def set_debugging(self, raw: Any) -> DispatchResult:
        return self._dispatch("set debugging", lambda: encode_debugging(parse_bool(raw, "enabled")))

    def get_status(self) -> DispatchResult:
        return self._dispatch("get status", encode_get_status)

    def get_version(self) -> DispatchResult:
        """Query the firmware version; detail holds the version string."""
        return self._forward("get version", lambda: (self._link.probe_version(),))

    def full_reset(self) -> DispatchResult:
        """Reboot the controller. Not acknowledged by the firmware."""
        return self._dispatch("full reset", encode_full_reset)

    def enter_bootloader(self) -> DispatchResult:
        """Reboot the controller into its bootloader for flashing."""
        return self._dispatch("enter bootloader", encode_enter_bootloader)

    # ================================================================
    # INTERNALS
    # ================================================================

    def _dispatch(self, operation: str, build: Callable[[], Command]) -> DispatchResult:
        try:
            command = build()
        except ValidationError as e:
            logger.info(f"Rejected {operation}: {e.log_line()}")
            return DispatchResult.from_error(e)

        return self._forward(operation, lambda: self._payload(self._link.send(command)))

    def _forward(self, operation: str, call: Callable[[], tuple[str, ...]]) -> DispatchResult:
        try:
            detail = call()
        except (TransportError, DeviceResponseError, DeviceConnectionError) as e:
            logger.warning(f"Failed to {operation}: {e.log_line()}")
            return DispatchResult.from_error(e)

        logger.info(f"{operation.capitalize()}: OK")
        return DispatchResult.success(detail)

    @staticmethod
    def _payload(ack) -> tuple[str, ...]:
        return ack.response.payload if ack.response is not None else ()


def describe(result: DispatchResult, on_error: Optional[str] = None) -> str:
    """One-line human description of a result, for the CLI."""
    if result.ok:
        return "OK" + (f": {':'.join(result.detail)}" if result.detail else "")
    return f"{on_error or 'Failed'} ({result.category}): {result.message}"
