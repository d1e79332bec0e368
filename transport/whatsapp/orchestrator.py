"""
Message Orchestrator

Render-then-deliver for every actionable message of one webhook request.

Rules:
- Strictly sequential: message N+1 starts after message N is delivered
- First failure aborts the rest of the batch
- Already-delivered messages stay delivered (no rollback, no retries)
- Both external calls are bounded by a timeout
"""

import asyncio
import logging
from typing import Iterable, Optional

from services.imaging import ImageBackend

from .schemas import ActionableMessage
from .sender import WhatsAppSender

logger = logging.getLogger(__name__)


IMAGE_FILENAME = "message_highlight.png"


class DependencyError(Exception):
    """
    Image generation or delivery failed for one message of a batch.

    Carries enough context to replay the batch by hand.
    """

    def __init__(
        self,
        index: int,
        destination: str,
        stage: str,
        cause: BaseException,
        message_id: Optional[str] = None,
    ):
        self.index = index
        self.destination = destination
        self.stage = stage
        self.cause = cause
        self.message_id = message_id
        super().__init__(
            f"Message {index} to {destination} failed during {stage}: "
            f"{type(cause).__name__}: {cause}"
        )


class MessageOrchestrator:
    """Sequential generate → deliver pipeline over a batch of messages."""

    def __init__(
        self,
        image_backend: ImageBackend,
        sender: WhatsAppSender,
        filename: str = IMAGE_FILENAME,
        generation_timeout_s: float = 30.0,
        delivery_timeout_s: float = 30.0,
    ):
        self.image_backend = image_backend
        self.sender = sender
        self.filename = filename
        self.generation_timeout_s = generation_timeout_s
        self.delivery_timeout_s = delivery_timeout_s

    async def process(self, messages: Iterable[ActionableMessage]) -> int:
        """
        Render and deliver each message in order.

        Args:
            messages: Actionable messages, usually the lazy extract_messages()
                iterator. Errors raised while iterating propagate unchanged.

        Returns:
            Number of messages delivered

        Raises:
            DependencyError: Generation or delivery failed; the remaining
                messages were not attempted
        """

        delivered = 0

        for index, message in enumerate(messages):
            logger.info(
                f"Received message from {message.sender}: {message.text}",
                extra={
                    "sender_id": message.sender,
                    "message_id": message.message_id,
                    "destination": message.destination,
                },
            )

            try:
                image = await self._generate(message.text)
            except Exception as e:
                raise DependencyError(
                    index, message.destination, "generate", e, message.message_id
                ) from e

            try:
                await asyncio.wait_for(
                    self.sender.send_image(message.destination, image, self.filename),
                    timeout=self.delivery_timeout_s,
                )
            except Exception as e:
                raise DependencyError(
                    index, message.destination, "deliver", e, message.message_id
                ) from e

            delivered += 1

        return delivered

    async def _generate(self, text: str) -> bytes:
        # Rendering is CPU-bound; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(
            loop.run_in_executor(None, self.image_backend.generate, text),
            timeout=self.generation_timeout_s,
        )
