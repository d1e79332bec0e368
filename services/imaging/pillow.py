"""
Pillow image backend.

Renders a message onto a padded "highlight" card and encodes it as PNG.

Features:
- Word wrapping measured against the real font, so lines never overflow
- Explicit newlines in the message are preserved
- Optional TrueType font via IMAGE_FONT_PATH, else Pillow's bundled default
- Card height grows with the text; width is fixed

Install: pip install Pillow
"""

import io
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .base import ImageBackend, ImageGenerationError


Color = Tuple[int, int, int]


class PillowImageBackend(ImageBackend):
    """Text → PNG card renderer."""

    def __init__(
        self,
        width: int = 800,
        font_size: int = 36,
        font_path: Optional[str] = None,
        padding: int = 48,
        line_spacing: int = 12,
        background: Color = (37, 211, 102),
        foreground: Color = (255, 255, 255),
    ):
        """
        Args:
            width:        Card width in pixels.
            font_size:    Font size in points.
            font_path:    Path to a .ttf/.otf file. Uses the bundled
                          default font when omitted.
            padding:      Margin between card edge and text.
            line_spacing: Extra pixels between wrapped lines.
            background:   Card colour (RGB).
            foreground:   Text colour (RGB).
        """
        if width <= 2 * padding:
            raise ValueError("width must be larger than twice the padding")

        self.width = width
        self.font_size = font_size
        self.font_path = font_path
        self.padding = padding
        self.line_spacing = line_spacing
        self.background = background
        self.foreground = foreground
        self._font = self._load_font()

    def _load_font(self) -> ImageFont.ImageFont:
        if self.font_path:
            try:
                return ImageFont.truetype(self.font_path, self.font_size)
            except OSError as e:
                raise ImageGenerationError(
                    f"Cannot load font {self.font_path}: {e}"
                ) from e
        return ImageFont.load_default(size=self.font_size)

    def generate(self, text: str) -> bytes:
        if not text:
            raise ImageGenerationError("Cannot render empty text")

        try:
            # Measure on a scratch canvas, then draw on a sized one
            scratch = ImageDraw.Draw(Image.new("RGB", (1, 1)))
            max_text_width = self.width - 2 * self.padding
            lines = self._wrap(scratch, text, max_text_width)
            body = "\n".join(lines)

            left, top, right, bottom = scratch.multiline_textbbox(
                (0, 0), body, font=self._font, spacing=self.line_spacing
            )
            height = (bottom - top) + 2 * self.padding

            image = Image.new("RGB", (self.width, height), self.background)
            draw = ImageDraw.Draw(image)
            draw.multiline_text(
                (self.padding - left, self.padding - top),
                body,
                font=self._font,
                fill=self.foreground,
                spacing=self.line_spacing,
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            return buffer.getvalue()

        except ImageGenerationError:
            raise
        except Exception as e:
            raise ImageGenerationError(f"Rendering failed: {e}") from e

    def _wrap(self, draw: ImageDraw.ImageDraw, text: str, max_width: int) -> List[str]:
        """Greedy word wrap. Words wider than a full line are split by character."""
        lines: List[str] = []

        for paragraph in text.splitlines() or [""]:
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if draw.textlength(candidate, font=self._font) <= max_width:
                    current = candidate
                    continue

                if current:
                    lines.append(current)
                    current = ""

                # Word alone still too wide
                while draw.textlength(word, font=self._font) > max_width and len(word) > 1:
                    cut = len(word) - 1
                    while cut > 1 and draw.textlength(word[:cut], font=self._font) > max_width:
                        cut -= 1
                    lines.append(word[:cut])
                    word = word[cut:]
                current = word

            lines.append(current)

        return lines
