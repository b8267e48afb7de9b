"""Bridge configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from ledbridge.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".ledbridge" / "config.json"


class BridgeConfig(BaseModel):
    """Process-start configuration. Not reloaded while running."""

    # Serial link
    serial_port: str = Field(
        default="/dev/ttyACM0",
        description="Serial device path or pyserial URL (e.g. socket://host:port)",
    )
    baud_rate: int = Field(default=115200, gt=0, description="Serial baud rate (8N1)")
    ack_timeout: float = Field(
        default=0.5,
        gt=0,
        description="Seconds to wait for the controller to acknowledge a command",
    )
    write_timeout: float = Field(
        default=1.0, gt=0, description="Seconds before a blocked serial write is abandoned"
    )

    # HTTP server
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="HTTP bind port")
    static_dir: Path | None = Field(
        default=None, description="Directory with a web page to serve at '/'"
    )

    @field_serializer("static_dir")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string."""
        return str(path) if path is not None else None

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "BridgeConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.ledbridge/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
