"""
Infrastructure initialization and bootstrap.

Builds every service handle once, at startup, and wires them into the
orchestrator. Handles are passed explicitly; nothing is a module global.
"""

from typing import Optional

from config import Config
from services.imaging import ImageBackend
from transport.whatsapp.orchestrator import MessageOrchestrator
from transport.whatsapp.sender import WhatsAppSender

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Tests pass their own image_backend/sender to substitute doubles.
    """

    def __init__(
        self,
        config: Config,
        infra_config: Optional[InfraConfig] = None,
        image_backend: Optional[ImageBackend] = None,
        sender: Optional[WhatsAppSender] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.config = config
        self.infra_config = infra_config or get_config()
        self.image_backend = image_backend or self.infra_config.create_image_backend()
        self.sender = sender or self.infra_config.create_sender(config)
        self.orchestrator = MessageOrchestrator(
            image_backend=self.image_backend,
            sender=self.sender,
            generation_timeout_s=self.infra_config.image_timeout_s,
            delivery_timeout_s=self.infra_config.delivery_timeout_s,
        )

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(image={type(self.image_backend).__name__}, "
            f"sender={type(self.sender).__name__}, "
            f"phone_id={self.config.business_phone_id})"
        )


def bootstrap_infrastructure(
    config: Optional[Config] = None,
    infra_config: Optional[InfraConfig] = None,
) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Application configuration (read from environment if omitted)
        infra_config: Backend selection (read from environment if omitted)

    Returns:
        InfraBootstrap instance with all backends initialized

    Raises:
        ConfigError: Required configuration is missing
    """
    return InfraBootstrap(config or Config.from_env(), infra_config)
