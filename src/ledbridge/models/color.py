"""Color model for LED control."""

import re

from pydantic import BaseModel, ConfigDict, Field

from ledbridge.exceptions import ValidationError

_HEX_COLOR = re.compile(r"#?([0-9a-fA-F]{6})")


class Color(BaseModel):
    """Standard 8-bit RGB color model.

    The firmware receives colors as a single 24-bit value (0xRRGGBB);
    the model is frozen so it can be shared between threads safely.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def from_hex(cls, value: str, field: str = "color") -> "Color":
        """Parse a CSS hex color string ('#rrggbb' or 'rrggbb').

        Raises:
            ValidationError: If the string is not exactly six hex digits

        Example:
            >>> Color.from_hex("#4f2d86")
            Color(r=79, g=45, b=134)
        """
        if not isinstance(value, str):
            raise ValidationError(field, value, "expected a '#rrggbb' string")

        match = _HEX_COLOR.fullmatch(value.strip())
        if match is None:
            raise ValidationError(field, value, "expected a '#rrggbb' hex color")

        return cls.from_u32(int(match.group(1), 16))

    @classmethod
    def from_u32(cls, rgb32: int) -> "Color":
        """Create a color from a packed 0xRRGGBB integer (upper byte ignored)."""
        return cls(r=(rgb32 >> 16) & 0xFF, g=(rgb32 >> 8) & 0xFF, b=rgb32 & 0xFF)

    def to_u32(self) -> int:
        """Pack the channels into a 0xRRGGBB integer."""
        return self.r << 16 | self.g << 8 | self.b

