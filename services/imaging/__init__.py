"""
Image rendering service exports.

Clean interface for the orchestrator to import rendering components.
"""

from .base import PNG_SIGNATURE, ImageBackend, ImageGenerationError
from .pillow import PillowImageBackend
from .stub import StubImageBackend

__all__ = [
    "PNG_SIGNATURE",
    "ImageBackend",
    "ImageGenerationError",
    "PillowImageBackend",
    "StubImageBackend",
]
