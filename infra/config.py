"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
The image renderer defaults to the local Pillow backend.
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

from config import Config, ConfigError
from services.imaging import ImageBackend, PillowImageBackend, StubImageBackend
from transport.whatsapp.sender import WhatsAppSender


ImageBackendType = Literal["pillow", "stub"]


def _env_number(name: str, default: str, cast):
    """Read a numeric variable, raising ConfigError on garbage."""
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Image rendering
    image_backend: ImageBackendType
    image_width: int
    image_font_size: int
    image_font_path: Optional[str]

    # Timeouts (seconds)
    image_timeout_s: float
    delivery_timeout_s: float

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Renderer: pillow, 800px wide, 36pt bundled font
        - Timeouts: 30s for rendering, 30s for delivery
        """
        return cls(
            image_backend=os.getenv("IMAGE_BACKEND", "pillow"),  # type: ignore
            image_width=_env_number("IMAGE_WIDTH", "800", int),
            image_font_size=_env_number("IMAGE_FONT_SIZE", "36", int),
            image_font_path=os.getenv("IMAGE_FONT_PATH") or None,
            image_timeout_s=_env_number("IMAGE_TIMEOUT_S", "30", float),
            delivery_timeout_s=_env_number("DELIVERY_TIMEOUT_S", "30", float),
        )

    def create_image_backend(self) -> ImageBackend:
        """Create image backend instance based on configuration."""
        if self.image_backend == "stub":
            return StubImageBackend()
        elif self.image_backend == "pillow":
            return PillowImageBackend(
                width=self.image_width,
                font_size=self.image_font_size,
                font_path=self.image_font_path,
            )
        else:
            raise ValueError(f"Unknown IMAGE_BACKEND: {self.image_backend!r}")

    def create_sender(self, config: Config) -> WhatsAppSender:
        """Create the Cloud API sender for the configured business number."""
        return WhatsAppSender(
            access_token=config.access_token,
            phone_number_id=config.business_phone_id,
            api_version=config.api_version,
            base_url=config.api_base_url,
            timeout=self.delivery_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get infrastructure configuration."""
    return InfraConfig.from_env()
