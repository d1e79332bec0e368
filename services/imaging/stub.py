"""
Stub image backend for testing and offline development.

Deterministic, fast, and never fails silently.
"""

import hashlib

from .base import PNG_SIGNATURE, ImageBackend, ImageGenerationError


class StubImageBackend(ImageBackend):
    """
    Deterministic fake renderer for testing and CI.

    Returns the PNG signature followed by a digest of the text, so equal
    inputs always produce equal bytes.
    """

    def generate(self, text: str) -> bytes:
        if not text:
            raise ImageGenerationError("Cannot render empty text")

        return PNG_SIGNATURE + hashlib.sha256(text.encode("utf-8")).digest()
