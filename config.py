"""
Configuration management for the Message Highlight bot.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


REQUIRED_VARS = (
    "WHATSAPP_ACCESS_TOKEN",
    "WHATSAPP_BUSINESS_ACCOUNT_ID",
    "WHATSAPP_PHONE_NUMBER",
    "WHATSAPP_BUSINESS_PHONE_ID",
    "WEBHOOK_VERIFY_TOKEN",
)


class ConfigError(Exception):
    """Required configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class Config:
    """Process-wide configuration. Read once at startup, never mutated."""

    # WhatsApp Cloud API account
    access_token: str
    business_account_id: str
    phone_number: str
    business_phone_id: str

    # Webhook
    verify_token: str
    app_secret: Optional[str] = None
    webhook_url: Optional[str] = None

    # Cloud API endpoint
    api_version: str = "v18.0"
    api_base_url: str = "https://graph.facebook.com"

    # Server
    port: int = 3000
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Raises:
            ConfigError: One or more required variables are unset
        """
        missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        try:
            port = int(os.getenv("PORT", "3000"))
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {os.getenv('PORT')!r}")

        return cls(
            access_token=os.environ["WHATSAPP_ACCESS_TOKEN"],
            business_account_id=os.environ["WHATSAPP_BUSINESS_ACCOUNT_ID"],
            phone_number=os.environ["WHATSAPP_PHONE_NUMBER"],
            business_phone_id=os.environ["WHATSAPP_BUSINESS_PHONE_ID"],
            verify_token=os.environ["WEBHOOK_VERIFY_TOKEN"],
            app_secret=os.getenv("WHATSAPP_APP_SECRET") or None,
            webhook_url=os.getenv("WEBHOOK_URL") or None,
            api_version=os.getenv("WHATSAPP_API_VERSION", "v18.0"),
            api_base_url=os.getenv("WHATSAPP_API_BASE_URL", "https://graph.facebook.com"),
            port=port,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

    def public_info(self) -> dict:
        """Non-sensitive configuration, safe to expose over HTTP."""
        return {
            "environment": self.environment,
            "business_account_id": self.business_account_id,
            "phone_number": self.phone_number,
            "business_phone_id": self.business_phone_id,
            "api_version": self.api_version,
            "signature_verification": self.app_secret is not None,
            "port": self.port,
        }


if __name__ == "__main__":
    # Test configuration loading
    try:
        config = Config.from_env()
    except ConfigError as e:
        print(f"Validation: FAILED ({e})")
    else:
        print("Configuration loaded:")
        for key, value in config.public_info().items():
            print(f"  {key}: {value}")
        print("\n  Validation: PASSED")
