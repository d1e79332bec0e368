"""
Image rendering abstract interface.

Role: Text → image rendering only.

Rules:
- Output-only (no state)
- Synchronous (callers run it off the event loop)
- All failures are explicit and typed
"""

from abc import ABC, abstractmethod


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ImageGenerationError(Exception):
    """Image could not be rendered."""
    pass


class ImageBackend(ABC):
    """
    Abstract image rendering boundary.
    The orchestrator depends ONLY on this interface.
    """

    @abstractmethod
    def generate(self, text: str) -> bytes:
        """
        Render text into an encoded image.

        Args:
            text: Message content to render

        Returns:
            Encoded image bytes (PNG)

        Raises:
            ImageGenerationError: Rendering failed
        """
        raise NotImplementedError
